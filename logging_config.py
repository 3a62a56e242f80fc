"""
Logging Configuration
Sets up logging for the OBJ reader modules when run from the command line
"""

import logging
import sys

LOGGER_NAMES = ('obj_parser', 'obj_accumulator', 'obj_model', 'mesh_export', 'obj_inspect')


def setup_logging(level=logging.INFO, log_file=None, stream=None):
    """
    Attach handlers to the loggers of the reader modules

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to also write logs to
        stream: Console stream for log lines (default sys.stdout)

    Returns:
        list: The configured loggers
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handlers = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    loggers = []
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Drop handlers from an earlier call so messages are not duplicated
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()
        for handler in handlers:
            logger.addHandler(handler)
        loggers.append(logger)

    return loggers
