"""
Logging setup for the doc-preview application.

Modules log through ``logging.getLogger(__name__)``; the entry point calls
``setup_logging()`` once to attach a console handler to the root logger.
"""
import logging
import sys

from doc_preview.config.settings import LOG_DATE_FORMAT, LOG_FORMAT, LOG_LEVEL

_configured = False


def setup_logging(level: str = LOG_LEVEL) -> None:
    """
    Configure the root logger with a console handler.

    Safe to call on every Streamlit rerun; only the first call installs
    the handler.

    Args:
        level: Log level name, e.g. "INFO" or "DEBUG"
    """
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # litellm and httpx are chatty at INFO
    logging.getLogger("LiteLLM").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True
