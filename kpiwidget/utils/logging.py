import logging
import os

import colorlog

LOG_LEVEL_ENV_VAR = 'KPIWIDGET_LOG_LEVEL'

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'bold_red',
}

formatter = colorlog.ColoredFormatter(
    "%(log_color)s%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_colors=LOG_COLORS
)

handler = logging.StreamHandler()
handler.setFormatter(formatter)


def get_log_level() -> int:
    """Level from $KPIWIDGET_LOG_LEVEL (name or number); WARNING when unset or unrecognized."""
    raw = os.environ.get(LOG_LEVEL_ENV_VAR, '').strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper()) if raw else logging.WARNING
    return level if isinstance(level, int) else logging.WARNING


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(get_log_level())
    if handler not in logger.handlers:
        logger.addHandler(handler)
    logger.propagate = False
    return logger
