"""Core pipeline components for cbarchiver."""
from .archive_handler import ArchiveHandler, ContainerType, select_container_type
from .archiver_locator import ArchiverLocator
from .directory_walker import DirectoryWalker
from .errors import (
    PackError,
    ArchiverMissing,
    FolderEmpty,
    EnumerateFailed,
    TargetExists,
    RenameFailed,
    PageDamaged,
    ArchiveFailed,
    ArchiveVerifyFailed,
    SpawnFailed,
)
from .events import Starting, Fraction, Message, Done, Aborted, FolderResult, RunResult
from .filesystem_utils import FileSystemUtils
from .image_analyzer import ImageAnalyzer
from .packaging_worker import PackagingPipeline, PackOptions
from .page_sorter import compare_pages, sort_pages
from .renamer import RenameMap, Renamer, canonical_width

__all__ = [
    "ArchiveHandler",
    "ContainerType",
    "select_container_type",
    "ArchiverLocator",
    "DirectoryWalker",
    "PackError",
    "ArchiverMissing",
    "FolderEmpty",
    "EnumerateFailed",
    "TargetExists",
    "RenameFailed",
    "PageDamaged",
    "ArchiveFailed",
    "ArchiveVerifyFailed",
    "SpawnFailed",
    "Starting",
    "Fraction",
    "Message",
    "Done",
    "Aborted",
    "FolderResult",
    "RunResult",
    "FileSystemUtils",
    "ImageAnalyzer",
    "PackagingPipeline",
    "PackOptions",
    "compare_pages",
    "sort_pages",
    "RenameMap",
    "Renamer",
    "canonical_width",
]
