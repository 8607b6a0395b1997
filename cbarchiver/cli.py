#!/usr/bin/env python3
"""
Command-line interface for the comic folder archiver.
Packs folders of page scans into CB7/CBZ archives with the external 7z tool.
"""
import argparse
import json
import sys
import time
from pathlib import Path

from .core.archive_handler import ContainerType
from .core.packaging_worker import PackagingPipeline, PackOptions
from .stats_tracker import StatsTracker, print_lifetime_stats, print_summary_report
from .utils import make_logging_sink, setup_logging

# Global settings management
DEFAULT_CONFIG_DIR = Path.home() / ".cbarchiver"
DEFAULT_SETTINGS_FILE = DEFAULT_CONFIG_DIR / "settings.json"

SETTING_KEYS = ("verbose", "silent", "container_type", "verify_archives", "check_pages", "timeout")


def load_global_settings(settings_file=None):
    """Load global settings from JSON file."""
    settings_file = Path(settings_file or DEFAULT_SETTINGS_FILE)
    if settings_file.exists():
        try:
            with open(settings_file, encoding="utf-8") as f:
                settings = json.load(f)
        except json.JSONDecodeError as e:
            error_msg = f"Invalid JSON in settings file: {e}"
            print(f"Warning: {error_msg}", file=sys.stderr)
            return {}, error_msg
        except OSError as e:
            error_msg = f"Error reading settings file: {e}"
            print(f"Warning: {error_msg}", file=sys.stderr)
            return {}, error_msg
        if not isinstance(settings, dict):
            error_msg = "Settings file must contain a JSON object"
            print(f"Warning: {error_msg}", file=sys.stderr)
            return {}, error_msg
        return settings, None
    return {}, None


def save_global_settings(settings, settings_file=None):
    """Save global settings to JSON file."""
    settings_file = Path(settings_file or DEFAULT_SETTINGS_FILE)
    try:
        settings_file.parent.mkdir(parents=True, exist_ok=True)
        with open(settings_file, "w", encoding="utf-8") as f:
            json.dump(settings, f, indent=2)
        return True, None
    except OSError as e:
        error_msg = f"Error saving settings file: {e}"
        print(f"Error: {error_msg}", file=sys.stderr)
        return False, error_msg


def apply_global_settings(args, settings):
    """Fill options the command line left unset from saved settings."""
    if not getattr(args, "verbose", False) and settings.get("verbose", False):
        args.verbose = True
    if not getattr(args, "silent", False) and settings.get("silent", False):
        args.silent = True
    if args.command != "pack":
        return args

    if args.type is None:
        args.type = settings.get("container_type", "auto")
    if args.verify is None:
        args.verify = bool(settings.get("verify_archives", False))
    if args.check_pages is None:
        args.check_pages = bool(settings.get("check_pages", False))
    if args.timeout is None:
        args.timeout = settings.get("timeout")
    return args


def _container_type_name(value):
    """argparse type: validate a container type name."""
    try:
        return ContainerType.from_name(value).ext
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _positive_float(value):
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive number of seconds")
    return number


def _add_verbosity_arguments(parser):
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )
    group.add_argument(
        "--silent", "-s", action="store_true", help="Suppress all output except errors"
    )


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="cbarchiver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Pack folders of numbered page scans into CB7/CBZ comic archives.",
        epilog="""Examples:
  %(prog)s pack comics/
  %(prog)s pack --type cbz "Volume 01" "Volume 02"
  %(prog)s config --type auto --verify
  %(prog)s stats show""",
    )
    subparsers = parser.add_subparsers(
        dest="command", help="Available commands", metavar="COMMAND"
    )

    # Pack command
    pack_parser = subparsers.add_parser(
        "pack",
        help="Pack page folders into archives",
        description="Sort, rename and archive every folder of JPEG pages under the given paths.",
    )
    pack_parser.set_defaults(func=handle_pack_command)
    _add_verbosity_arguments(pack_parser)
    pack_parser.add_argument(
        "--type",
        "-t",
        type=_container_type_name,
        default=None,
        help="Container type: auto, cb7 or cbz (default: auto)",
    )
    pack_parser.add_argument(
        "--verify",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Read back each archive and check its pages",
    )
    pack_parser.add_argument(
        "--check-pages",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Decode every page with Pillow before renaming",
    )
    pack_parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Kill 7z after this many seconds per folder",
    )
    pack_parser.add_argument(
        "--no-stats",
        action="store_true",
        help="Do not record this run in lifetime statistics",
    )
    pack_parser.add_argument("paths", nargs="+", help="Folders to pack")

    # Config command
    config_parser = subparsers.add_parser(
        "config",
        help="Save default settings",
        description="Save default settings used by later runs.",
    )
    config_parser.set_defaults(func=handle_config_command)
    _add_verbosity_arguments(config_parser)
    config_parser.add_argument(
        "--show", action="store_true", help="Show saved settings"
    )
    config_parser.add_argument(
        "--type", "-t", type=_container_type_name, dest="container_type",
        help="Default container type",
    )
    config_parser.add_argument(
        "--verify", action=argparse.BooleanOptionalAction, default=None,
        dest="verify_archives", help="Verify archives by default",
    )
    config_parser.add_argument(
        "--check-pages", action=argparse.BooleanOptionalAction, default=None,
        help="Check pages by default",
    )
    config_parser.add_argument(
        "--timeout", type=_positive_float, default=None,
        help="Default archiver timeout in seconds",
    )

    # Stats command
    stats_parser = subparsers.add_parser(
        "stats",
        help="Display and manage usage statistics",
        description="Display and manage usage statistics.",
    )
    stats_parser.set_defaults(func=handle_stats_command, verbose=False, silent=False)
    stats_parser.add_argument(
        "--file", type=str, metavar="FILE", help="Specify stats file path"
    )
    stats_parser.add_argument(
        "stats_command", nargs="?", choices=["show", "reset"], default="show",
        help="show (default) or reset",
    )

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return None
    return args


def handle_pack_command(args, logger, stats_tracker=None):
    """Handle the pack command."""
    inputs = []
    for raw in args.paths:
        try:
            path = Path(raw).resolve()
        except (OSError, RuntimeError) as e:
            logger.error(f"Invalid input path {raw}: {e}")
            return 1
        if not path.exists():
            logger.error(f"Input path does not exist: {path}")
            return 1
        inputs.append(path)

    options = PackOptions(
        verify_archives=args.verify,
        check_pages=args.check_pages,
        timeout=args.timeout,
    )
    pipeline = PackagingPipeline(logger=logger, options=options)
    emit = make_logging_sink(logger)

    start_time = time.time()
    if not pipeline.submit(inputs, args.type, emit):
        return 1
    result = pipeline.wait()
    execution_time = time.time() - start_time

    if result is None:
        logger.error("Packing did not finish")
        return 1

    print_summary_report(result, logger)
    minutes, seconds = divmod(execution_time, 60)
    logger.info(f"Execution time: {int(minutes)}m {seconds:.1f}s")

    if stats_tracker and result.archived:
        stats_tracker.add_run(result, execution_time)

    return 1 if result.aborted else 0


def handle_config_command(args, logger, stats_tracker=None):
    """Handle the config command."""
    settings, _ = load_global_settings()
    if args.show:
        if not settings:
            logger.info("No saved settings")
        for key in SETTING_KEYS:
            if key in settings:
                logger.info(f"  {key} = {settings[key]}")
        return 0

    updates = {}
    if args.verbose:
        updates["verbose"] = True
        updates["silent"] = False
    if args.silent:
        updates["silent"] = True
        updates["verbose"] = False
    if args.container_type is not None:
        updates["container_type"] = args.container_type
    if args.verify_archives is not None:
        updates["verify_archives"] = args.verify_archives
    if args.check_pages is not None:
        updates["check_pages"] = args.check_pages
    if args.timeout is not None:
        updates["timeout"] = args.timeout

    if not updates:
        logger.info(
            "No settings to save. Use --type, --verify, --check-pages, --timeout, --verbose or --silent."
        )
        return 0

    settings = {**settings, **updates}
    logger.info("Saving global settings...")
    success, error = save_global_settings(settings)
    if success:
        logger.info("✓ Global settings saved successfully")
        return 0
    logger.error(f"Failed to save global settings: {error}")
    return 1


def handle_stats_command(args, logger, stats_tracker=None):
    """Handle the stats command."""
    if stats_tracker is None:
        logger.error("Statistics tracking is disabled")
        return 1
    if args.stats_command == "reset":
        stats_tracker.reset()
        logger.info("Statistics reset")
        return 0
    print_lifetime_stats(stats_tracker, logger)
    return 0


def main(argv=None):
    """Main entry point with subcommand dispatch."""
    args = parse_arguments(argv)
    if args is None:
        return 2

    # Apply global settings before configuring logging so verbosity is respected
    settings, _ = load_global_settings()
    args = apply_global_settings(args, settings)
    logger = setup_logging(args.verbose, args.silent)

    if args.command == "stats":
        stats_tracker = StatsTracker(args.file)
    elif args.command == "pack" and not args.no_stats:
        stats_tracker = StatsTracker()
    else:
        stats_tracker = None

    return args.func(args, logger, stats_tracker)


if __name__ == "__main__":
    sys.exit(main())
