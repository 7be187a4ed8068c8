import logging
import os

from kino_client.config import LOG_DIR, LOG_LEVEL

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

logger = logging.getLogger("kino-client")


def setup_logging(log_dir: str = LOG_DIR, level: str = LOG_LEVEL) -> logging.Logger:
    """Писать лог клиента в <log_dir>/kino-client.log и в консоль"""
    os.makedirs(log_dir, exist_ok=True)

    # Повторная настройка заменяет обработчики, а не добавляет новые
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    file_handler = logging.FileHandler(os.path.join(log_dir, "kino-client.log"), encoding="utf-8")
    for handler in (file_handler, logging.StreamHandler()):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level.upper())
    return logger


setup_logging()
