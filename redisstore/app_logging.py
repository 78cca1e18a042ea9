"""JSON log output for processes that use the session store."""

import logging
from typing import Union

from pythonjsonlogger.json import JsonFormatter


def setup_logger(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Send JSON-formatted records from all loggers to stderr."""
    logHandler = logging.StreamHandler()
    formatter = JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s',
                              rename_fields={'levelname': 'level', 'asctime': 'timestamp'})
    logHandler.setFormatter(formatter)
    logger = logging.getLogger()
    logger.addHandler(logHandler)
    logger.setLevel(level)
    return logger
