import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    # Circulation rules
    fine_per_day: int = int(os.getenv("FINE_PER_DAY", "10"))
    max_issue_days: int = int(os.getenv("MAX_ISSUE_DAYS", "15"))

    # Reporting
    recent_books_limit: int = int(os.getenv("RECENT_BOOKS_LIMIT", "5"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(cfg: "Settings | None" = None) -> None:
    cfg = cfg or settings
    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
