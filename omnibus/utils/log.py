"""
Logging setup for the OmniBus application.

Modules log through ``logging.getLogger(__name__)``; this configures the root
handler once for the CLI and the web app.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str = "INFO", force: bool = False) -> None:
    """
    Configure root logging with a single stream handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        force: Reconfigure even if logging was already set up
    """
    global _configured

    if _configured and not force:
        return

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=force)

    # Keep third-party request logging quiet unless debugging
    if level.upper() != "DEBUG":
        logging.getLogger("urllib3").setLevel(logging.WARNING)

    _configured = True
