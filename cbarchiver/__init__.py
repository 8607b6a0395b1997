"""Repackage folders of comic page scans into CB7/CBZ archives."""

__version__ = "1.0.0"
