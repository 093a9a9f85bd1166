import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None, log_dir: str | None = None):
    """
    Console + rotating file (<LOG_DIR>/app.log, 5 x 5MB) on the root logger.
    Calling it again is a no-op once handlers exist.
    """
    level = (level or settings.LOG_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        return

    path = Path(log_dir or settings.LOG_DIR)
    path.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [
        logging.StreamHandler(),
        RotatingFileHandler(path / "app.log", maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8"),
    ]
    for h in handlers:
        h.setLevel(level)
        h.setFormatter(formatter)
        root.addHandler(h)

    # SQL echo stays off unless asked for explicitly
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
