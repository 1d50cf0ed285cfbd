"""Logging configuration"""

import logging
import sys

from backend.invoicing.core.settings import Settings


def setup_logging(settings: Settings) -> None:
    """Install stdout (and optional file) handlers on the root logger."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Avoid stacking handlers when the app is reloaded
    if not any(getattr(h, "_invoicing_handler", False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        console_handler._invoicing_handler = True
        root_logger.addHandler(console_handler)

        if settings.log_file:
            file_handler = logging.FileHandler(settings.log_file)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            file_handler._invoicing_handler = True
            root_logger.addHandler(file_handler)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
