#!/usr/bin/env python3
"""
Packaging pipeline for comic folders.

One background worker takes the folders of a request and packs them one
after another: list pages, sort, pick a container, rename, run 7z. The
first failure ends the run; folders already packed are kept.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .archive_handler import ArchiveHandler, ContainerType, select_container_type
from .archiver_locator import ArchiverLocator
from .directory_walker import DirectoryWalker
from .errors import ArchiverMissing, EnumerateFailed, FolderEmpty, PackError
from .events import Aborted, Done, FolderResult, Fraction, Message, RunResult, Starting
from .filesystem_utils import FileSystemUtils
from .image_analyzer import ImageAnalyzer
from .page_sorter import sort_pages
from .renamer import RenameMap, Renamer


@dataclass
class PackOptions:
    """Per-run switches that do not change the archive layout."""

    verify_archives: bool = False
    check_pages: bool = False
    timeout: Optional[float] = None


class PackagingPipeline:
    """
    Packs folders of page images into CB7/CBZ archives.

    The archiver is located once at construction. ``submit`` starts a run on
    a background thread and reports through the caller's ``emit`` sink;
    ``run`` does the same work on the calling thread. Only one run can be
    in flight at a time.
    """

    def __init__(self, logger=None, options=None, locator=None):
        self.logger = logger or logging.getLogger(__name__)
        self.options = options or PackOptions()
        locator = locator or ArchiverLocator(logger=self.logger)
        self.archiver = locator.locate()
        self.walker = DirectoryWalker(self.logger)
        self.renamer = Renamer(self.logger)
        self.last_result = None
        self._lock = threading.Lock()
        self._running = False
        self._worker_thread = None

    @property
    def available(self):
        return self.archiver is not None

    @property
    def running(self):
        with self._lock:
            return self._running

    def _try_start(self):
        with self._lock:
            if self._running:
                return False
            self._running = True
            return True

    def _finish(self):
        with self._lock:
            self._running = False

    def submit(self, inputs, requested_type, emit):
        """
        Start packing ``inputs`` on the background worker.

        Returns:
            bool: True if a run was started. A request made while another
            run is in flight is dropped without any event.

        Raises:
            ValueError: if ``requested_type`` is not a known container type
        """
        requested_type = ContainerType.from_name(requested_type)
        if not self.available:
            self._report_abort(ArchiverMissing(), emit)
            return False

        if not self._try_start():
            self.logger.debug("Packing already in progress, request ignored")
            return False

        inputs = [Path(p) for p in inputs]
        self._worker_thread = threading.Thread(
            target=self._worker_loop, args=(inputs, requested_type, emit), daemon=True
        )
        self._worker_thread.start()
        return True

    def wait(self, timeout=None):
        """Block until the current background run ends; return its result."""
        if self._worker_thread:
            self._worker_thread.join(timeout)
        return self.last_result

    def _worker_loop(self, inputs, requested_type, emit):
        try:
            self.last_result = self._run(inputs, requested_type, emit)
        except Exception as e:
            self.logger.exception(f"Unexpected error while packing: {e}")
            self.last_result = RunResult([], aborted=True, reason=str(e))
            emit(Message(str(e)))
            emit(Aborted(str(e)))
        finally:
            self._finish()

    def run(self, inputs, requested_type, emit):
        """
        Pack ``inputs`` on the calling thread.

        Returns:
            RunResult, or None if another run is already in flight
        """
        requested_type = ContainerType.from_name(requested_type)
        if not self._try_start():
            self.logger.debug("Packing already in progress, request ignored")
            return None
        try:
            self.last_result = self._run([Path(p) for p in inputs], requested_type, emit)
            return self.last_result
        finally:
            self._finish()

    def _report_abort(self, error, emit):
        reason = str(error)
        self.logger.error(reason)
        emit(Message(reason))
        emit(Aborted(reason))
        return reason

    def _run(self, inputs, requested_type, emit):
        requested = ContainerType.from_name(requested_type)
        if not self.available:
            reason = self._report_abort(ArchiverMissing(), emit)
            return RunResult([], aborted=True, reason=reason)

        inputs = [Path(p).resolve() for p in inputs]
        emit(Message("Directory read"))
        folders = self.walker.find_leaf_folders(inputs)
        total = len(folders)
        self.logger.info(f"Found {total} folders to pack")

        results = []
        for index, folder in enumerate(folders):
            emit(Starting(index + 1, total, folder.name))
            try:
                result = self.process_folder(folder, requested)
            except PackError as e:
                self.logger.error(f"Stopped at {folder}")
                reason = self._report_abort(e, emit)
                return RunResult(results, aborted=True, reason=reason)

            results.append(result)
            if result.skipped:
                emit(Message(f"{result.archive.name} already exists, skipped."))
                continue
            emit(Fraction((index + 1) / total))

        emit(Message("Complete"))
        emit(Done())
        return RunResult(results)

    def process_folder(self, folder, requested):
        """
        Pack one leaf folder next to itself.

        Returns:
            FolderResult: skipped when the target archive already exists

        Raises:
            PackError: on the first failure; earlier renames are kept
        """
        folder = Path(folder)
        try:
            pages = ImageAnalyzer.find_page_images(folder)
        except OSError as e:
            raise EnumerateFailed(folder, e) from e
        if not pages:
            raise FolderEmpty(folder)

        pages = sort_pages(pages)
        source_bytes = ImageAnalyzer.total_size(pages)
        container_type = select_container_type(requested, source_bytes)
        archive = ArchiveHandler.archive_path(folder, container_type)
        self.logger.debug(
            f"{folder.name}: {len(pages)} pages, "
            f"{FileSystemUtils.get_file_size_formatted(source_bytes)[0]}, type {container_type.ext}"
        )

        if archive.exists():
            self.logger.warning(f"Archive exists, skipping {folder}: {archive}")
            return FolderResult(folder, archive, container_type.ext, len(pages), source_bytes, skipped=True)

        if self.options.check_pages:
            ImageAnalyzer.verify_pages(pages, self.logger)

        rename_map = RenameMap.build(folder, pages)
        self.renamer.rename(rename_map)

        handler = ArchiveHandler(self.archiver, self.logger, timeout=self.options.timeout)
        handler.run(container_type, archive, rename_map.targets)

        if self.options.verify_archives:
            ArchiveHandler.verify_archive(archive, container_type, rename_map.targets, self.logger)

        archive_bytes = FileSystemUtils.size_or_zero(archive)
        self.logger.info(f"Packaged {folder.name} successfully")
        return FolderResult(folder, archive, container_type.ext, len(pages), source_bytes, archive_bytes)
