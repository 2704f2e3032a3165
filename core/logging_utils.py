import logging
import sys

from core.config import LOG_LEVEL

_configured = False


def configure_logging(level: str | int = LOG_LEVEL) -> None:
    """Attach a single stdout handler to the root logger.

    Streamlit re-executes page scripts on every interaction, so repeated calls
    must not stack handlers.
    """
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    _configured = True
