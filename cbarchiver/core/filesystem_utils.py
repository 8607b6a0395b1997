#!/usr/bin/env python3
"""
File system helpers shared by the pipeline and the reports.
"""

from pathlib import Path


class FileSystemUtils:
    """Size formatting and archive ratio helpers."""

    UNITS = ('B', 'KB', 'MB', 'GB', 'TB')

    @classmethod
    def get_file_size_formatted(cls, file_path_or_size):
        """
        Return a tuple of (human_readable_size, size_in_bytes).
        Accepts a path (sized from disk) or a raw byte count.
        """
        if isinstance(file_path_or_size, (int, float)):
            size_bytes = file_path_or_size
        else:
            size_bytes = Path(file_path_or_size).stat().st_size

        size = float(size_bytes)
        idx = 0
        while size >= 1024 and idx < len(cls.UNITS) - 1:
            size /= 1024
            idx += 1

        return f"{size:.2f} {cls.UNITS[idx]}", size_bytes

    @staticmethod
    def size_or_zero(file_path):
        """Byte size of ``file_path``, or 0 if it cannot be read."""
        try:
            return Path(file_path).stat().st_size
        except OSError:
            return 0

    @staticmethod
    def calculate_archive_ratio(source_size, archive_size):
        """Compare an archive with the pages it was built from."""
        if source_size <= 0:
            return {'saved_bytes': 0, 'saved_percentage': 0.0, 'ratio': 1.0}

        saved = source_size - archive_size
        return {
            'saved_bytes': saved,
            'saved_percentage': (saved / source_size) * 100,
            'ratio': archive_size / source_size,
        }
