"""
Container selection and archiver invocation for CB7/CBZ output.
The archive itself is written by an external 7z process.
"""

import subprocess
import zipfile
from enum import Enum
from pathlib import Path
from typing import ClassVar

from .errors import ArchiveFailed, ArchiveVerifyFailed, SpawnFailed

# Above this many bytes of pages, Auto picks zip for faster random access.
AUTO_ZIP_THRESHOLD = 16 * 1024 * 1024


class ContainerType(Enum):
    """Archive container requested by the caller."""

    AUTO = ("auto", ())
    SEVEN_ZIP = ("cb7", ("-t7z", "-ms=on"))
    ZIP = ("cbz", ("-tzip",))

    def __init__(self, ext, flags):
        self.ext = ext
        self.flags = flags

    def __str__(self):
        return self.ext

    @classmethod
    def from_name(cls, name):
        """Resolve a user-facing name such as ``auto``, ``cb7`` or ``zip``."""
        if isinstance(name, cls):
            return name
        aliases = {
            "auto": cls.AUTO,
            "cb7": cls.SEVEN_ZIP, "7z": cls.SEVEN_ZIP, "sevenzip": cls.SEVEN_ZIP,
            "cbz": cls.ZIP, "zip": cls.ZIP,
        }
        try:
            return aliases[str(name).lower()]
        except KeyError:
            raise ValueError(
                f"Unsupported container type: {name}. Supported types are: {', '.join(cls.names())}"
            ) from None

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(member.ext for member in cls)


def select_container_type(requested, total_size):
    """
    Resolve the container type for one folder.

    Args:
        requested: ContainerType asked for by the caller
        total_size: total byte size of the folder's pages

    Returns:
        ContainerType: SEVEN_ZIP or ZIP, never AUTO
    """
    if requested is not ContainerType.AUTO:
        return requested
    if total_size > AUTO_ZIP_THRESHOLD:
        return ContainerType.ZIP
    return ContainerType.SEVEN_ZIP


class ArchiveHandler:
    """Builds and runs the 7z command that packs one folder."""

    BASE_ARGS: ClassVar[tuple[str, ...]] = ("a", "-mx=9", "-bb3")

    def __init__(self, archiver, logger=None, timeout=None):
        """
        Args:
            archiver: path of a working 7z executable
            logger: Logger instance
            timeout: optional seconds after which the archiver is killed
        """
        self.archiver = archiver
        self.logger = logger
        self.timeout = timeout

    @staticmethod
    def archive_path(folder, container_type):
        """Return the sibling archive path ``<folder>.<ext>``."""
        return Path(f"{Path(folder)}.{container_type.ext}")

    def build_command(self, container_type, archive, pages):
        """Compose the archiver argv: verb, options, type flags, archive, pages."""
        cmd = [self.archiver, *self.BASE_ARGS, *container_type.flags, str(archive)]
        cmd.extend(str(page) for page in pages)
        return cmd

    def run(self, container_type, archive, pages):
        """
        Pack ``pages`` into ``archive`` and wait for the archiver to exit.

        Raises:
            SpawnFailed: if the archiver cannot be started
            ArchiveFailed: on a non-zero exit status or a timeout
        """
        cmd = self.build_command(container_type, archive, pages)
        if self.logger:
            self.logger.info(f"Creating {container_type.ext.upper()} file: {archive}")
            self.logger.debug(f"Running: {' '.join(cmd)}")

        try:
            # run() drains both pipes and reaps the child, also on timeout
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            if self.logger:
                self.logger.error(f"Archiver timed out after {self.timeout}s for {archive}")
            raise ArchiveFailed(f"7z timed out after {self.timeout}s") from e
        except OSError as e:
            if self.logger:
                self.logger.error(f"Could not start {self.archiver}: {e}")
            raise SpawnFailed(self.archiver, e) from e

        if self.logger:
            for line in result.stdout.splitlines():
                if line.strip():
                    self.logger.debug(f"7z: {line}")

        if result.returncode != 0:
            if self.logger:
                self.logger.error(
                    f"Archiver exited with status {result.returncode}: {result.stderr.strip()}"
                )
            raise ArchiveFailed(result.stderr, result.returncode)

        return result

    @classmethod
    def list_members(cls, archive, container_type):
        """List the member names stored in ``archive``."""
        readers = {
            ContainerType.ZIP: cls._list_zip_members,
            ContainerType.SEVEN_ZIP: cls._list_7z_members,
        }
        reader = readers.get(container_type)
        if not reader:
            raise ValueError(f"Cannot read archives of type {container_type.name}")
        return reader(archive)

    @staticmethod
    def _list_zip_members(archive):
        with zipfile.ZipFile(archive, "r") as z:
            return [m.filename for m in z.infolist() if not m.is_dir()]

    @staticmethod
    def _list_7z_members(archive):
        import py7zr

        with py7zr.SevenZipFile(archive, mode="r") as z:
            return [f.filename for f in z.list() if not f.is_directory]

    @classmethod
    def verify_archive(cls, archive, container_type, pages, logger=None):
        """
        Check that ``archive`` holds exactly the given pages.

        Raises:
            ArchiveVerifyFailed: if the archive cannot be read or its
                members differ from the page names
        """
        import py7zr

        try:
            members = cls.list_members(archive, container_type)
        except (OSError, zipfile.BadZipFile, py7zr.Bad7zFile) as e:
            raise ArchiveVerifyFailed(f"{Path(archive).name}: {e}") from e

        stored = sorted(Path(name).name for name in members)
        expected = sorted(Path(page).name for page in pages)
        if stored != expected:
            missing = sorted(set(expected) - set(stored))
            extra = sorted(set(stored) - set(expected))
            raise ArchiveVerifyFailed(
                f"{Path(archive).name}: contents differ from pages "
                f"(missing: {', '.join(missing) or '-'}, unexpected: {', '.join(extra) or '-'})"
            )
        if logger:
            logger.debug(f"Verified {len(stored)} members in {archive}")
