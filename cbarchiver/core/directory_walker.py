#!/usr/bin/env python3
"""
Breadth-wise discovery of the folders to pack.
"""

import logging
from pathlib import Path

from .image_analyzer import ImageAnalyzer


class DirectoryWalker:
    """
    Expands user-supplied paths into the ordered list of candidate folders.

    Every directory with at least one child is reported, level by level:
    all folders found at depth ``k`` come before any folder at depth ``k+1``.
    Directories that cannot be read are treated as empty.
    """

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)

    def children(self, directory):
        """Return the direct children of ``directory`` sorted by name."""
        try:
            return sorted(Path(directory).iterdir(), key=lambda p: p.name)
        except OSError as e:
            self.logger.debug(f"Cannot list {directory}: {e}")
            return []

    def walk(self, inputs):
        """
        Return every directory on a branch from ``inputs`` down to its files.

        Args:
            inputs: iterable of user-supplied paths (files are ignored)

        Returns:
            list[Path]: folders in breadth-first encounter order
        """
        folders = []
        seen = set()
        frontier = [Path(p) for p in inputs]
        root_level = True

        while frontier:
            next_frontier = []
            for path in frontier:
                if not path.is_dir():
                    continue
                # Links below the user-supplied roots are not followed
                if not root_level and path.is_symlink():
                    continue
                key = path.resolve()
                if key in seen:
                    continue
                seen.add(key)

                kids = self.children(path)
                if not kids:
                    continue
                folders.append(path)
                next_frontier.extend(kids)
            frontier = next_frontier
            root_level = False

        return folders

    def find_leaf_folders(self, inputs):
        """
        Return the folders from ``walk`` that directly hold page images.

        Folders that cannot be enumerated at this stage are kept so the
        caller reports the failure when it processes them. ``walk`` already
        drops folders it could not list, so this only happens when a folder
        becomes unreadable between the two passes.
        """
        leaves = []
        for folder in self.walk(inputs):
            try:
                if ImageAnalyzer.has_page_images(folder):
                    leaves.append(folder)
                else:
                    self.logger.debug(f"No pages in {folder}, skipping")
            except OSError:
                leaves.append(folder)
        return leaves
