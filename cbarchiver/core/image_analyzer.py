#!/usr/bin/env python3
"""
Page image detection and integrity checks.
Only JPEG pages are packed; other files in a folder are left alone.
"""

import os
import re
from pathlib import Path

from .errors import PageDamaged
from .filesystem_utils import FileSystemUtils


class ImageAnalyzer:
    """Centralized page filtering for leaf folders."""

    PAGE_PATTERN = re.compile(r".+\.(jpe?g)$", re.IGNORECASE)

    @classmethod
    def is_page_name(cls, name):
        """Check if a file name looks like a JPEG page."""
        return cls.PAGE_PATTERN.search(str(name)) is not None

    @classmethod
    def is_page_image(cls, file_path):
        """Check if a path is a regular file with a JPEG page name."""
        file_path = Path(file_path)
        return file_path.is_file() and cls.is_page_name(file_path.name)

    @classmethod
    def find_page_images(cls, directory):
        """
        List the page images directly inside ``directory``.

        The result is in directory order; use ``PageSorter`` to order pages.
        Raises OSError when the directory cannot be read.
        """
        with os.scandir(directory) as entries:
            return [
                Path(entry.path)
                for entry in entries
                if entry.is_file() and cls.is_page_name(entry.name)
            ]

    @classmethod
    def has_page_images(cls, directory):
        """Check if ``directory`` holds at least one page image."""
        return bool(cls.find_page_images(directory))

    @staticmethod
    def total_size(paths):
        """Sum the byte sizes of ``paths``; unreadable files count as 0."""
        return sum(FileSystemUtils.size_or_zero(path) for path in paths)

    @staticmethod
    def verify_page(image_file):
        """
        Decode the header and structure of a page without touching its pixels.

        Raises:
            PageDamaged: if Pillow cannot identify or verify the image
        """
        from PIL import Image, UnidentifiedImageError

        try:
            with Image.open(image_file) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise PageDamaged(image_file, e) from e

    @classmethod
    def verify_pages(cls, pages, logger=None):
        """Verify every page in order, stopping at the first damaged one."""
        for page in pages:
            cls.verify_page(page)
        if logger:
            logger.debug(f"Verified {len(pages)} pages")
