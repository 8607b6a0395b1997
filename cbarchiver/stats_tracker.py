#!/usr/bin/env python3
"""
Statistics tracking and reporting for packed folders.
"""

import sys
import json
import datetime
from pathlib import Path

from .core.filesystem_utils import FileSystemUtils


def _fmt(size):
    return FileSystemUtils.get_file_size_formatted(size)[0]


class StatsTracker:
    """Tracks and persists lifetime statistics for the packer."""

    def __init__(self, stats_file=None):
        if stats_file is None:
            self.stats_file = Path.home() / '.cbarchiver' / '.cbarchiver-stats.json'
        else:
            self.stats_file = Path(stats_file)
        self.stats = self._load_stats()

    def _load_stats(self):
        if self.stats_file.exists():
            try:
                with open(self.stats_file, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                print(f"Warning: Could not load stats file: {e}", file=sys.stderr)
                return self._get_default_stats()
        else:
            return self._get_default_stats()

    def _get_default_stats(self):
        now = datetime.datetime.now().isoformat()
        return {
            "total_folders_archived": 0,
            "total_pages": 0,
            "total_source_size_bytes": 0,
            "total_archive_size_bytes": 0,
            "first_run": now,
            "last_run": now,
            "run_count": 0,
            "runs": []
        }

    def save_stats(self):
        try:
            self.stats_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.stats_file, 'w', encoding='utf-8') as f:
                json.dump(self.stats, f, indent=2)
        except OSError as e:
            print(f"Warning: Could not save stats file: {e}", file=sys.stderr)

    def reset(self):
        self.stats = self._get_default_stats()
        self.save_stats()

    def add_run(self, run_result, execution_time):
        """Record the archived folders of a finished run."""
        archived = run_result.archived
        pages = sum(r.pages for r in archived)
        source_size = sum(r.source_bytes for r in archived)
        archive_size = sum(r.archive_bytes for r in archived)
        run_data = {
            "timestamp": datetime.datetime.now().isoformat(),
            "folders_archived": len(archived),
            "folders_skipped": len(run_result.skipped),
            "pages": pages,
            "source_size_bytes": source_size,
            "archive_size_bytes": archive_size,
            "aborted": run_result.aborted,
            "execution_time_seconds": execution_time
        }

        self.stats["total_folders_archived"] += len(archived)
        self.stats["total_pages"] += pages
        self.stats["total_source_size_bytes"] += source_size
        self.stats["total_archive_size_bytes"] += archive_size
        self.stats["last_run"] = run_data["timestamp"]
        self.stats["run_count"] += 1

        self.stats["runs"].append(run_data)
        self.stats["runs"] = self.stats["runs"][-20:]
        self.save_stats()

    def get_lifetime_stats(self):
        source = self.stats["total_source_size_bytes"]
        archived = self.stats["total_archive_size_bytes"]
        ratio = FileSystemUtils.calculate_archive_ratio(source, archived)

        try:
            first_run = datetime.datetime.fromisoformat(self.stats["first_run"]).strftime("%Y-%m-%d")
            last_run = datetime.datetime.fromisoformat(self.stats["last_run"]).strftime("%Y-%m-%d")
        except (ValueError, TypeError):
            first_run = self.stats["first_run"]
            last_run = self.stats["last_run"]

        return {
            "folders_archived": self.stats["total_folders_archived"],
            "pages": self.stats["total_pages"],
            "source_size": _fmt(source),
            "archive_size": _fmt(archived),
            "savings_percentage": f"{ratio['saved_percentage']:.1f}%",
            "first_run": first_run,
            "last_run": last_run,
            "run_count": self.stats["run_count"]
        }


def print_summary_report(run_result, logger):
    """Log a per-folder report of a finished run."""
    if not run_result.results:
        return

    logger.info("=" * 80)
    logger.info("PACKING SUMMARY REPORT")
    logger.info("=" * 80)
    logger.info(f"{'Folder':<30} {'Type':<5} {'Pages':>6} {'Pages size':>12} {'Archive':>12}")
    logger.info("-" * 80)
    for r in run_result.results:
        if r.skipped:
            logger.info(f"{r.folder.name[:30]:<30} {r.container_type:<5} {'skipped (archive exists)':>32}")
            continue
        logger.info(
            f"{r.folder.name[:30]:<30} {r.container_type:<5} {r.pages:>6} "
            f"{_fmt(r.source_bytes):>12} {_fmt(r.archive_bytes):>12}"
        )

    archived = run_result.archived
    source = sum(r.source_bytes for r in archived)
    packed = sum(r.archive_bytes for r in archived)
    ratio = FileSystemUtils.calculate_archive_ratio(source, packed)
    logger.info("-" * 80)
    logger.info(f"Archived: {len(archived)}, skipped: {len(run_result.skipped)}")
    if archived:
        logger.info(f"Pages size:   {_fmt(source)}")
        logger.info(f"Archive size: {_fmt(packed)} ({ratio['saved_percentage']:.1f}% saved)")
    if run_result.aborted:
        logger.info(f"Stopped early: {run_result.reason}")
    logger.info("=" * 80)


def print_lifetime_stats(stats_tracker, logger):
    """Print lifetime statistics."""
    s = stats_tracker.get_lifetime_stats()

    logger.info("=" * 80)
    logger.info("LIFETIME STATISTICS")
    logger.info("=" * 80)
    logger.info(f"Folders Archived: {s['folders_archived']} (across {s['run_count']} runs)")
    logger.info(f"Pages:            {s['pages']}")
    logger.info(f"First Run:        {s['first_run']}")
    logger.info(f"Last Run:         {s['last_run']}")
    logger.info(f"Pages size:       {s['source_size']}")
    logger.info(f"Archive size:     {s['archive_size']} ({s['savings_percentage']} saved)")
    logger.info("=" * 80)
