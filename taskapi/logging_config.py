import logging
import sys
from typing import Optional

from .config import settings

HANDLER_NAME = "taskapi"


def setup_logging(level: Optional[str] = None) -> None:
    """Attach the stdout handler to the root logger, once, using settings.

    SQL statements go through the ``sqlalchemy.engine`` logger and are shown
    only when ``SQL_ECHO`` is on.
    """
    root = logging.getLogger()
    if not any(h.get_name() == HANDLER_NAME for h in root.handlers):
        h = logging.StreamHandler(sys.stdout)
        h.set_name(HANDLER_NAME)
        h.setFormatter(logging.Formatter(settings.LOG_FORMAT))
        root.addHandler(h)
    root.setLevel((level or settings.LOG_LEVEL).upper())
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.SQL_ECHO else logging.WARNING
    )
