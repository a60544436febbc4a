import logging
import sys
from familytree.config import get_settings

settings = get_settings()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [{env}] %(message)s"

# Chatty third-party loggers held at WARNING unless we are debugging
NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg")

def setup_logging():
    """Configures the ``familytree`` logger; every module logger is a child of it."""
    level = settings.LOG_LEVEL.upper()
    logger = logging.getLogger("familytree")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT.format(env=settings.ENVIRONMENT)))
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if level == "DEBUG" else logging.WARNING)

    return logger
