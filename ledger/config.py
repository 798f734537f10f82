import logging
import os

from dotenv import load_dotenv

from ledger.domain import ROUND_FINAL, ROUNDING_POLICIES

load_dotenv()


class Config:
    def __init__(self, environ=None):
        env = os.environ if environ is None else environ

        # how fractional shares are rounded: "final" or "per_expense"
        self.ROUNDING = env.get("LEDGER_ROUNDING", ROUND_FINAL).strip().lower()
        if self.ROUNDING not in ROUNDING_POLICIES:
            raise ValueError(
                f"LEDGER_ROUNDING must be one of {', '.join(ROUNDING_POLICIES)}, got {self.ROUNDING!r}"
            )

        self.LOG_LEVEL = env.get("LEDGER_LOG_LEVEL", "WARNING").upper()
        self.SEED_PATH = env.get("LEDGER_SEED_PATH", "data/seed.json")
        # display only, amounts are always in cents of a single currency
        self.CURRENCY = env.get("LEDGER_CURRENCY", "EUR")


def load_config() -> Config:
    return Config()


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
