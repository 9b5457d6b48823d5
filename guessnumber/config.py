"""
Single place to read settings from the environment.

Values come from real env vars or a local .env (not committed).
"""

import os

from dotenv import load_dotenv

# 1) Load env vars from .env if present
# dev convenience; in prod the platform injects env vars
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# 2) Runtime mode: "local" auto-creates tables, "test" skips startup hooks
APP_ENV = os.getenv("APP_ENV", "local")

# 3) Scoreboard database. SQLite file by default so the game runs without MySQL.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+pysqlite:///./guessnumber.db")

# 4) Secret source: random.org first, local secure random as fallback
USE_RANDOM_ORG = _flag("USE_RANDOM_ORG", "true")
RANDOM_ORG_TIMEOUT = float(os.getenv("RANDOM_ORG_TIMEOUT", "3.0"))

# 5) Cosmetic "system is thinking" delays (seconds) before a guess is revealed
FIRST_GUESS_DELAY = float(os.getenv("FIRST_GUESS_DELAY", "0.8"))
NEXT_GUESS_DELAY = float(os.getenv("NEXT_GUESS_DELAY", "0.6"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# 6) Sessions untouched for this long (seconds) are dropped from memory
SESSION_IDLE_TIMEOUT = float(os.getenv("SESSION_IDLE_TIMEOUT", "3600"))
