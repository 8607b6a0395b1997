#!/usr/bin/env python3
"""
Locates a working 7z executable among a fixed list of candidates.
"""

import logging
import subprocess


class ArchiverLocator:
    """Probes candidate paths for a 7z executable that runs cleanly."""

    CANDIDATES = ("7z", "/usr/local/bin/7z", "/opt/local/bin/7z")

    def __init__(self, candidates=None, logger=None):
        self.candidates = tuple(candidates) if candidates is not None else self.CANDIDATES
        self.logger = logger or logging.getLogger(__name__)

    def probe(self, candidate):
        """Run ``candidate`` without arguments and report whether it exited with 0."""
        try:
            result = subprocess.run(
                [candidate],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            self.logger.debug(f"Archiver candidate {candidate} not usable: {e}")
            return False
        self.logger.debug(f"Archiver candidate {candidate} exited with {result.returncode}")
        return result.returncode == 0

    def locate(self):
        """Return the first working candidate, or ``None`` when none works."""
        for candidate in self.candidates:
            if self.probe(candidate):
                self.logger.debug(f"Using archiver: {candidate}")
                return candidate
        self.logger.error(
            "No working 7z found (tried: %s)", ", ".join(self.candidates)
        )
        return None
