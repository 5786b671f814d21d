"""Root logger configuration."""

import logging

from journal.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str | None = None):
    """Configure the root logger once; safe to call from both the API and the CLI."""
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    # SQL echo is controlled by the engine, keep the sqlalchemy loggers quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
