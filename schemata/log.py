from logging import FileHandler, Formatter, getLogger
from os.path import abspath

from .config import ConfigData, DEFAULT_CONFIG

_formatter = Formatter(fmt="[%(levelname)s] %(message)s")

logger = getLogger("schemata")


def _make_handler(config: ConfigData) -> FileHandler:
    # NOTE: The file is only created once the first record is written.
    handler = FileHandler(config.log_file, delay=True, mode="w")
    handler.setFormatter(_formatter)
    return handler


_handler = _make_handler(DEFAULT_CONFIG)
logger.addHandler(_handler)
logger.setLevel(DEFAULT_CONFIG.log_level)


def configure_logger(config: ConfigData) -> None:
    """
    Apply the logging options in `config` to the package logger.

    Parameters
    ----------
    config: ConfigData
        Where the log level and the log file come from.
    """
    global _handler  # pylint: disable=W0603
    if logger.level != config.log_level:
        logger.setLevel(config.log_level)
    if _handler.baseFilename == abspath(config.log_file):
        return

    logger.removeHandler(_handler)
    _handler.close()
    _handler = _make_handler(config)
    logger.addHandler(_handler)
