"""Logging setup for mdquery tools."""

import logging
import os

LOG_LEVEL_ENV = "MDQUERY_LOG_LEVEL"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure root logging and return the ``mdquery`` logger.

    ``MDQUERY_LOG_LEVEL`` (e.g. ``DEBUG``) overrides the level picked by
    ``verbose``.
    """
    level = logging.INFO if verbose else logging.WARNING
    override = os.environ.get(LOG_LEVEL_ENV)
    if override:
        level = logging.getLevelName(override.upper())
        if not isinstance(level, int):
            raise ValueError(f"Invalid {LOG_LEVEL_ENV}: {override}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log = logging.getLogger("mdquery")
    log.setLevel(level)
    return log
