# pharmapos/core/logging.py
import logging

from pharmapos.core.config import settings


def configure_logging() -> None:
    """Configure le logging racine à partir des paramètres"""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=settings.LOG_FORMAT,
    )
