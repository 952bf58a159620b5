import logging
from typing import Union

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(logger_name: str = 'quickpose',
                 logger_level: int = logging.INFO,
                 logger_path: str = None,
                 logger_format: str = None) -> logging.Logger:
    """Set up a logger with a stream handler, and a file handler if
    logger_path is given.

    Args:
        logger_name (str, optional):
            Name of the logger. Defaults to 'quickpose'.
        logger_level (int, optional):
            Level of the logger. Defaults to logging.INFO.
        logger_path (str, optional):
            Path to a log file. Defaults to None.
        logger_format (str, optional):
            Format string for all handlers. Defaults to None,
            DEFAULT_FORMAT will be used.

    Returns:
        logging.Logger
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level=logger_level)
    handlers = [logging.StreamHandler()]
    if logger_path is not None:
        handlers.append(logging.FileHandler(logger_path))
    formatter = logging.Formatter(
        logger_format if logger_format is not None else DEFAULT_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(
        logger: Union[None, str, logging.Logger] = None) -> logging.Logger:
    """Get logger.

    Args:
        logger (Union[None, str, logging.Logger]):
            None for root logger. Besides, pass name of the
            logger or the logger itself.
            Defaults to None.

    Returns:
        logging.Logger
    """
    if logger is None or isinstance(logger, str):
        ret_logger = logging.getLogger(logger)
    else:
        ret_logger = logger
    return ret_logger
