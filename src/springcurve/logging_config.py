"""
Logging Configuration

The package only creates module loggers under ``springcurve`` and never
configures them on import; applications opt in with ``setup_logging``.
NaN warnings come from ``springcurve.solver_numpy``; cache and sampling
details are logged at DEBUG by ``springcurve.cache`` and ``springcurve.sampler``.
"""
import logging
import sys
from typing import Optional, Union

LOGGER_NAME = "springcurve"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        # "debug" and "DEBUG" both work
        return logging.getLevelName(level.upper())
    return level


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    propagate: bool = True,
) -> logging.Logger:
    """
    Attach handlers to the 'springcurve' logger and return it.

    Args:
        level: Level as a number or a name, e.g. logging.DEBUG or "debug"
            to see cache misses and sampling results.
        log_file: Optional path to also write records to (overwritten).
        propagate: Set False to keep springcurve records out of the root
            logger when the host application logs there too.
    """
    level = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = propagate

    # Calling twice replaces the handlers instead of doubling output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("springcurve logging at %s", logging.getLevelName(level))
    return logger
