"""
Logging configuration utilities.

ezluks is used interactively, so console lines stay short by default;
debug runs add timestamps and the logger name.
"""
import logging

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
DEBUG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        debug: Whether to enable debug logging
    """
    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        format=DEBUG_FORMAT if debug else CONSOLE_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger('ezluks')
    logger.setLevel(level)
