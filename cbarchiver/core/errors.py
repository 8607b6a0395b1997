#!/usr/bin/env python3
"""
Error kinds raised by the packing pipeline.
Each error renders as the short message shown to the user.
"""

from pathlib import Path


class PackError(Exception):
    """Base class for every failure that aborts a packing run."""


class ArchiverMissing(PackError):
    """No working 7z executable was found."""

    def __init__(self):
        super().__init__("Undefined 7z")


class FolderEmpty(PackError):
    def __init__(self, folder):
        self.folder = Path(folder)
        super().__init__(f"{self.folder.name} is empty.")


class EnumerateFailed(PackError):
    def __init__(self, path, cause):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path.name}: {cause}")


class TargetExists(PackError):
    """A canonical page name is already taken by another file."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(f"{self.path.parent.name}/{self.path.name} already exists.")


class RenameFailed(PackError):
    def __init__(self, source, cause):
        self.source = Path(source)
        self.cause = cause
        super().__init__(f"{self.source.name}: {cause}")


class PageDamaged(PackError):
    """A page could not be decoded by the integrity check."""

    def __init__(self, path, cause):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path.name}: {cause}")


class ArchiveFailed(PackError):
    """The archiver exited with a non-zero status."""

    def __init__(self, stderr_text, returncode=None):
        self.stderr_text = stderr_text
        self.returncode = returncode
        text = stderr_text.strip()
        if not text:
            text = f"7z exited with status {returncode}"
        super().__init__(text)


class ArchiveVerifyFailed(ArchiveFailed):
    """The archive was written but its contents do not match the pages."""


class SpawnFailed(PackError):
    def __init__(self, command, cause):
        self.command = command
        self.cause = cause
        super().__init__(f"{command}: {cause}")
