"""Centralized logging configuration for the Spend backend.

Standard usage:
    ```python
    import logging
    from spend.logging import setup_logging

    # Configure once at startup, from SPEND_LOGGING__* settings
    setup_logging()

    # Get loggers in each module
    logger = logging.getLogger(__name__)
    ```
"""

from .config import load_logging_config, setup_logging

__all__ = ["load_logging_config", "setup_logging"]
