# core/logger.py
import logging
from travel_inbox.core.config import settings

logger = logging.getLogger("travel_inbox")
logger.setLevel(settings.LOG_LEVEL.upper())

if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter("[%(asctime)s] [%(levelname)s] %(message)s"))
    logger.addHandler(console_handler)
