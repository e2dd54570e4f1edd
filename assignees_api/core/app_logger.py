import logging

from .settings import config_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER_NAME = "assignees_api"


def setup_logging() -> logging.Logger:
    level = getattr(logging, config_settings.LOG_LEVEL.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Avoid duplicate console handlers on re-import (uvicorn reload, tests)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.setLevel(level)
        logger.addHandler(handler)

    # Records are printed by the handler above only, not again by the root logger
    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger(ROOT_LOGGER_NAME)
    return base.getChild(name) if name else base


logger = setup_logging()
