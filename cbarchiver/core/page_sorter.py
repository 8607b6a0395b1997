#!/usr/bin/env python3
"""
Natural page ordering.

Pages are compared by the runs of digits embedded in their file names, so
``p2.jpg`` sorts before ``p10.jpg``. When the names carry a different number
of digit runs, or none at all, the full paths are compared as strings.
"""

import functools
import re
from pathlib import Path
from typing import List, Sequence

NUMBER_PATTERN = re.compile(r"\d+")


def _compare(a, b):
    return (a > b) - (a < b)


def number_runs(name: str) -> List[str]:
    """Return the maximal digit runs of ``name``, left to right."""
    return NUMBER_PATTERN.findall(name)


def compare_runs(a: str, b: str) -> int:
    """Compare two digit runs as unsigned integers of any length."""
    return _compare(int(a), int(b))


def compare_pages(a, b) -> int:
    """
    Compare two page paths; negative, zero or positive like ``cmp``.

    Args:
        a: first page path
        b: second page path

    Returns:
        int: -1, 0 or 1
    """
    a, b = Path(a), Path(b)
    runs_a = number_runs(a.name)
    runs_b = number_runs(b.name)

    if runs_a and runs_b and len(runs_a) == len(runs_b):
        for ra, rb in zip(runs_a, runs_b):
            result = compare_runs(ra, rb)
            if result:
                return result

    return _compare(str(a), str(b))


page_sort_key = functools.cmp_to_key(compare_pages)


def sort_pages(pages: Sequence) -> tuple:
    """Return ``pages`` as an immutable, naturally ordered page list."""
    return tuple(sorted((Path(p) for p in pages), key=page_sort_key))
