import logging
from careercoach.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO), format=LOG_FORMAT)
