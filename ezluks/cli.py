"""
Command-line interface for ezluks.

This module handles argument parsing and dispatches to the volume workflows.
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from ezluks.config import DEFAULT_MEDIA_ROOT, DEFAULT_MOUNT_ROOT, MountLayout, Settings, load_settings
from ezluks.utils.command import CommandRunner, SimulationMode
from ezluks.utils.format import TermColors, colorize
from ezluks.utils.logging import setup_logging
from ezluks.utils.privilege import PrivilegeMode
from ezluks.utils.validation import check_prerequisites
from ezluks.core.exceptions import EzluksError
from ezluks.core.volume import VolumeController

logger = logging.getLogger('ezluks')

USAGE = """Usage: ezluks [options] [command] [args]

Commands:
    open [block device e.g /dev/sda1] [mapper label e.g my_drive]
    close [mapper label e.g my_drive]
    format [block device e.g /dev/sda1]
"""


class UsageArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that prints the ezluks usage text and exits 1 on bad input."""

    def error(self, message: str) -> None:
        sys.stderr.write(f"{self.prog}: {message}\n\n")
        sys.stderr.write(USAGE)
        sys.exit(1)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Arguments without the program name, defaults to sys.argv[1:]

    Returns:
        Namespace containing parsed arguments
    """
    parser = UsageArgumentParser(
        prog="ezluks",
        description="Open, close and format LUKS encrypted volumes",
        epilog=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--privilege",
        choices=[mode.value for mode in PrivilegeMode],
        help="'root' expects to be run as root, 'elevate' runs each command through doas or sudo "
             "(default: root, or $EZLUKS_PRIVILEGE)"
    )

    parser.add_argument(
        "--layout",
        choices=[layout.value for layout in MountLayout],
        help="'user' mounts to <media root>/$USER/<label>, 'fixed' mounts to <mount root>/<label> "
             "(default: user, or $EZLUKS_LAYOUT)"
    )

    parser.add_argument(
        "--media-root",
        help=f"Base directory of per-user mount points (default: {DEFAULT_MEDIA_ROOT})"
    )

    parser.add_argument(
        "--mount-root",
        help=f"Base directory of mount points in the fixed layout (default: {DEFAULT_MOUNT_ROOT})"
    )

    parser.add_argument(
        "-s", "--simulate",
        action="store_true",
        help="Simulate operations without making any changes to the system"
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="command")

    open_parser = subparsers.add_parser("open", help="Decrypt a LUKS volume and mount it")
    open_parser.add_argument("device", help="Block device, e.g. /dev/sda1")
    open_parser.add_argument("label", help="Mapper label, e.g. my_drive")

    close_parser = subparsers.add_parser("close", help="Unmount a volume and close its mapper")
    close_parser.add_argument("label", help="Mapper label, e.g. my_drive")

    format_parser = subparsers.add_parser(
        "format", help="Wipe a block device into a new LUKS volume with a filesystem"
    )
    format_parser.add_argument("device", help="Block device, e.g. /dev/sda1")

    args = parser.parse_args(argv)
    if not args.command:
        parser.error("a command is required")
    return args


def display_simulation_summary(cmd_runner: CommandRunner) -> None:
    """
    Display a summary of the simulation.

    Args:
        cmd_runner: CommandRunner instance for executing commands
    """
    if not cmd_runner.simulating:
        return

    try:
        terminal_width = os.get_terminal_size().columns
    except (AttributeError, OSError):
        terminal_width = 80
    stars = "*" * terminal_width

    print(f"\n{colorize(stars, TermColors.SIM, cmd_runner.colored_output)}")
    print(colorize("SIMULATION COMPLETE - NO CHANGES WERE MADE",
                   TermColors.SIM + TermColors.BOLD, cmd_runner.colored_output))
    print(f"{colorize(stars, TermColors.SIM, cmd_runner.colored_output)}\n")
    print("The following operations would have been performed:")
    print(cmd_runner.get_simulation_report())


def run_command(args: argparse.Namespace, controller: VolumeController) -> None:
    if args.command == "open":
        controller.open_volume(args.device, args.label)
    elif args.command == "close":
        controller.close_volume(args.label)
    elif args.command == "format":
        controller.format_device(args.device)


def build_runner(settings: Settings) -> CommandRunner:
    return CommandRunner(
        SimulationMode.SIMULATE if settings.simulate else SimulationMode.DISABLED,
        settings.privilege,
        settings.colored_output,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_arguments(argv)
    setup_logging(args.debug)

    try:
        settings = load_settings(args)
        cmd_runner = build_runner(settings)

        if settings.simulate:
            logger.info("Running in simulation mode - NO CHANGES WILL BE MADE")

        check_prerequisites(settings)
        run_command(args, VolumeController(settings, cmd_runner))
        display_simulation_summary(cmd_runner)
        return 0

    except EzluksError as e:
        logger.error(colorize(str(e), TermColors.ERROR, not args.no_color))
        return 1

    except KeyboardInterrupt:
        logger.error("Operation cancelled by user")
        return 130

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1


# For module import compatibility
if __name__ == "__main__":
    sys.exit(main())
