import logging

from gameswap.config import config


def create_logger(level: int) -> logging.Logger:
    log_format = "%(asctime)s - %(levelname)s - %(module)s - %(message)s"
    formatter = logging.Formatter(fmt=log_format)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    logger = logging.getLogger("gameswap")
    logger.setLevel(level)
    if not logger.handlers:
        logger.addHandler(handler)
    return logger


logger = create_logger(config.environment.get_log_level())
