#!/usr/bin/env python3
"""
Canonical page renaming.

Sorted pages are renamed in place to ``0.jpg``, ``1.jpg`` ... with a
zero-padded width derived from the page count. Renaming never overwrites a
file and is not rolled back when it stops half way.
"""

import logging
from pathlib import Path
from typing import NamedTuple, Tuple

from .errors import RenameFailed, TargetExists


def canonical_width(count):
    """
    Digits needed to number ``count`` pages from zero, at least 1.

    Equal to ``ceil(log10(count))`` for ``count > 1``.
    """
    if count < 1:
        raise ValueError("Page count must be positive")
    return len(str(count - 1))


def canonical_names(count):
    """Return the canonical file names for ``count`` pages."""
    width = canonical_width(count)
    return [f"{i:0{width}d}.jpg" for i in range(count)]


class RenameMap(NamedTuple):
    """Pairs each sorted page with its canonical target path."""

    sources: Tuple[Path, ...]
    targets: Tuple[Path, ...]

    @classmethod
    def build(cls, folder, pages):
        folder = Path(folder)
        pages = tuple(Path(p) for p in pages)
        targets = tuple(folder / name for name in canonical_names(len(pages)))
        return cls(pages, targets)

    def __len__(self):
        return len(self.sources)


class Renamer:
    """Applies a ``RenameMap`` to the filesystem."""

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)

    def rename(self, rename_map):
        """
        Rename pages to their canonical names, in page order.

        Stops at the first page that already carries its canonical name:
        the rest of the folder is taken to be canonical too.

        Returns:
            int: number of files renamed

        Raises:
            TargetExists: if a target name is taken by a different file
            RenameFailed: if the filesystem refuses a rename
        """
        renamed = 0
        for source, target in zip(rename_map.sources, rename_map.targets):
            if source == target:
                self.logger.debug(f"{source.name} is already canonical, stopping")
                break

            if target.exists() or target.is_symlink():
                self.logger.error(f"Rename target exists: {target}")
                raise TargetExists(target)

            try:
                source.rename(target)
            except OSError as e:
                self.logger.error(f"Failed to rename {source} -> {target}: {e}")
                raise RenameFailed(source, e) from e
            renamed += 1

        self.logger.debug(f"Renamed {renamed} of {len(rename_map)} pages")
        return renamed
