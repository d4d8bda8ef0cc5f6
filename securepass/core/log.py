"""
SecurePass structured logging.

Provides a consistent logging interface for all core modules.
CLI output (cli.py) intentionally uses print() and is not routed here.
"""

import logging
from typing import Optional, Union


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under 'securepass'."""
    return logging.getLogger(f'securepass.{name}')


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the securepass root logger.

    Calling it again replaces the handlers installed by a previous call
    instead of stacking duplicates.

    Args:
        level: Logging level (default INFO), numeric or name
        log_file: Optional file path for file logging

    Returns:
        The configured 'securepass' logger
    """
    if isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    logger = logging.getLogger('securepass')
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, '_securepass', False):
            logger.removeHandler(handler)
            handler.close()

    fmt = logging.Formatter('%(asctime)s [%(name)s] %(levelname)s: %(message)s')

    handler = logging.StreamHandler()
    handler.setFormatter(fmt)
    handler._securepass = True
    logger.addHandler(handler)

    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setFormatter(fmt)
        fh._securepass = True
        logger.addHandler(fh)

    return logger
