import logging
from pathlib import Path
from typing import List

from src.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] - %(name)s - %(message)s"


def setup_logging(settings: Settings) -> None:
    """
    Configure root logging for the service.

    Records always go to the configured log file (append mode); console output
    is opt-in through ENABLE_CONSOLE_LOGGING.
    """
    log_path = Path(settings.logging.file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handlers: List[logging.Handler] = [logging.FileHandler(log_path, mode="a", encoding="utf-8")]
    if settings.features.console_logging:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=getattr(logging, settings.logging.level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    if settings.features.advanced_logging:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
