"""Main entry point and daemon loop for dwall."""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from dwall.config import Config, create_default_config, get_default_config_path
from dwall.context import Clock, capture_context
from dwall.images import ImageLibrary
from dwall.network import NetworkMonitor
from dwall.rules import (
    ContextSnapshot,
    Rule,
    RuleMode,
    active_rules,
    format_interval,
    validate_rule,
)
from dwall.storage import WallpaperStore
from dwall.time_interval import TimeParseError, parse_time
from dwall.wallpaper_manager import WallpaperManager


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging for stdout (systemd compatible)."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def open_store(config: Config) -> WallpaperStore:
    """Open the rule database, creating the table on first use."""
    store = WallpaperStore(config.database)
    store.init_db()
    return store


def evaluate(
    store: WallpaperStore,
    monitor: NetworkMonitor,
    clock: Clock,
) -> Tuple[ContextSnapshot, List[Rule]]:
    """Capture the context and match it against the stored rules."""
    ctx = capture_context(monitor, clock)
    rules = store.get_wallpaper_list()
    return ctx, active_rules(rules, ctx)


def run_daemon(config: Config, verbose: bool = False):
    """
    Run the wallpaper switching daemon.

    Args:
        config: Configuration object
        verbose: Enable verbose logging
    """
    setup_logging(verbose)
    logger.info("Starting dwall daemon...")

    store = open_store(config)
    library = ImageLibrary(config.image_dir, config.thumbnail_size)
    monitor = NetworkMonitor(config.network_backend, config.interface)
    clock = Clock(config.timezone)
    wallpaper_mgr = WallpaperManager(config.monitor)

    if not wallpaper_mgr.wait_for_hyprpaper():
        logger.error("Hyprpaper is not running. Please start hyprpaper first.")
        sys.exit(1)

    last_rule: Optional[Rule] = None

    logger.info("Daemon loop started")
    while True:
        try:
            _, active = evaluate(store, monitor, clock)
            shown = wallpaper_mgr.apply(active, library)

            if shown is not None and shown != last_rule:
                logger.info(f"Active rule: {shown.name}")
                last_rule = shown

            # Time rules flip on minute boundaries
            seconds_to_minute = 60 - clock.now().second
            sleep_seconds = max(1, min(config.check_interval, seconds_to_minute))

            logger.debug(f"Sleeping for {sleep_seconds}s")
            time.sleep(sleep_seconds)

        except KeyboardInterrupt:
            logger.info("Received interrupt signal, shutting down...")
            break
        except Exception as e:
            logger.error(f"Error in daemon loop: {e}", exc_info=True)
            time.sleep(config.check_interval)


def run_once(config: Config):
    """
    Evaluate the rules and set the wallpaper once.

    Args:
        config: Configuration object
    """
    setup_logging(verbose=True)

    wallpaper_mgr = WallpaperManager(config.monitor)
    if not wallpaper_mgr.wait_for_hyprpaper(max_wait=5):
        logger.error("Hyprpaper is not running")
        sys.exit(1)

    store = open_store(config)
    library = ImageLibrary(config.image_dir, config.thumbnail_size)
    monitor = NetworkMonitor(config.network_backend, config.interface)

    _, active = evaluate(store, monitor, Clock(config.timezone))
    if not active:
        logger.info("No active rule")
        return

    if wallpaper_mgr.apply(active, library) is None:
        logger.error("Failed to set wallpaper")
        sys.exit(1)
    logger.info("Wallpaper set successfully")


def run_test(config: Config):
    """
    Show the current context and which rules are active.

    Args:
        config: Configuration object
    """
    setup_logging(verbose=True)

    store = open_store(config)
    monitor = NetworkMonitor(config.network_backend, config.interface)
    ctx, active = evaluate(store, monitor, Clock(config.timezone))

    print(f"\nCurrent time: {ctx.now:%H:%M}")
    print(f"Current network: {ctx.ssid or '(not connected)'}")

    if not active:
        print("\nNo active rules.\n")
        return

    print("\nActive rules (highest priority first):")
    for rule in active:
        print(f"  [{rule.position}] {rule.name}: {rule.mode.value} {rule.info}")
    print(f"\nWallpaper: {active[0].filename}\n")


def list_rules(config: Config):
    """Print the configured rules in priority order."""
    store = open_store(config)
    rules = store.get_wallpaper_list()
    if not rules:
        print("No rules configured. Add one with 'dwall add'.")
        return

    for rule in rules:
        mode = rule.mode.value or "(unset)"
        print(f"[{rule.position}] {rule.name}: {mode} {rule.info}  -> {rule.filename}")


def add_rule(config: Config, args: argparse.Namespace):
    """
    Create or replace a rule from command-line arguments.

    Raises:
        ValueError: If the rule is invalid
        FileNotFoundError: If the image does not exist
    """
    if args.wifi is not None:
        mode, info = RuleMode.NETWORK, args.wifi
    else:
        try:
            start, end = parse_time(args.time[0]), parse_time(args.time[1])
        except TimeParseError as e:
            raise ValueError(str(e)) from e
        mode, info = RuleMode.TIME, format_interval(start, end)

    store = open_store(config)
    library = ImageLibrary(config.image_dir, config.thumbnail_size)
    position = args.position if args.position is not None else store.next_position()

    # Validate before touching any files
    validate_rule(Rule(position=position, name=args.name, mode=mode, info=info))

    filename = library.import_image(args.image)
    rule = Rule(position=position, name=args.name, mode=mode, info=info, filename=filename)

    previous = store.get_wallpaper(position)
    store.insert_wallpaper(rule)
    if previous is not None and previous.filename != filename:
        library.delete(previous.filename)

    print(f"Saved rule [{position}] {rule.name}: {mode.value} {info}")


def remove_rule(config: Config, position: int) -> bool:
    """Delete a rule and its image files."""
    store = open_store(config)
    rule = store.get_wallpaper(position)
    if rule is None:
        print(f"No rule at position {position}", file=sys.stderr)
        return False

    store.delete_wallpaper(position)
    ImageLibrary(config.image_dir, config.thumbnail_size).delete(rule.filename)
    print(f"Removed rule [{position}] {rule.name}")
    return True


def init_config(config_path: Path):
    """Generate a configuration template."""
    if config_path.exists():
        response = input(f"Config file already exists at {config_path}. Overwrite? [y/N] ")
        if response.lower() != 'y':
            print("Aborted.")
            return

    create_default_config(config_path)
    print(f"Configuration template created at: {config_path}")
    print("\nAdd rules with 'dwall add', then start the daemon with 'dwall'.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="dwall - Wi-Fi and time based wallpaper switcher"
    )
    parser.add_argument(
        '--config', '-c',
        type=Path,
        help='Path to configuration file (default: ~/.config/dwall/config.yaml)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    subparsers.add_parser('test', help='Show current context and active rules')
    subparsers.add_parser('once', help='Set wallpaper once and exit')
    subparsers.add_parser('init', help='Generate configuration template')
    subparsers.add_parser('list', help='List configured rules')

    add_parser = subparsers.add_parser('add', help='Add or replace a rule')
    add_parser.add_argument('name', help='Rule name')
    add_parser.add_argument('image', type=Path, help='Wallpaper image to import')
    condition = add_parser.add_mutually_exclusive_group(required=True)
    condition.add_argument('--wifi', metavar='SSID', help='Activate on this Wi-Fi network')
    condition.add_argument(
        '--time',
        nargs=2,
        metavar=('START', 'END'),
        help='Activate between START (inclusive) and END (exclusive), HH:mm'
    )
    add_parser.add_argument(
        '--position', '-p',
        type=int,
        help='Priority position (default: after the last rule)'
    )

    remove_parser = subparsers.add_parser('remove', help='Remove a rule')
    remove_parser.add_argument('position', type=int, help='Position of the rule')

    return parser


def cli(argv: Optional[List[str]] = None):
    """Command-line interface entry point."""
    args = build_parser().parse_args(argv)
    config_path = args.config or get_default_config_path()

    # Handle init command (doesn't need config)
    if args.command == 'init':
        init_config(config_path)
        return

    try:
        config = Config.load(config_path)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {config_path}", file=sys.stderr)
        print("Run 'dwall init' to create a template.", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == 'test':
        run_test(config)
    elif args.command == 'once':
        run_once(config)
    elif args.command == 'list':
        list_rules(config)
    elif args.command == 'add':
        try:
            add_rule(config, args)
        except (ValueError, FileNotFoundError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    elif args.command == 'remove':
        if not remove_rule(config, args.position):
            sys.exit(1)
    else:
        # Default: run daemon
        run_daemon(config, verbose=args.verbose)


if __name__ == '__main__':
    cli()
