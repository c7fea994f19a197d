"""
config.py
---------
Central configuration for the racetrip itinerary engine.
All secrets loaded from environment variables — never hard-coded.

Components read these values as ``config.X`` at call time, so tests and
callers can override a single attribute without reloading the module.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the repository root (if it exists).  Won't override vars
# already set in the shell.
_env_path = Path(__file__).resolve().parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# ── Day windows (HH:MM, local to the event timezone) ─────────────────────────
# Full-day window used for every day the traveler is present.
DAY_START: str = os.getenv("DAY_START", "08:00")
DAY_END: str   = os.getenv("DAY_END",   "22:00")
# Boundary days: the arrival day starts later, the departure day ends earlier.
ARRIVAL_TIME: str   = os.getenv("ARRIVAL_TIME",   "12:00")
DEPARTURE_TIME: str = os.getenv("DEPARTURE_TIME", "18:00")

# ── Matching / placement policy ──────────────────────────────────────────────
# Leftover gap pieces shorter than this are folded into the neighbouring slot.
MIN_USEFUL_GAP_MINUTES: int = int(os.getenv("MIN_USEFUL_GAP_MINUTES", "30"))
# Where an experience sits inside a larger gap: "left" | "center"
EXPERIENCE_ALIGNMENT: str = os.getenv("EXPERIENCE_ALIGNMENT", "left")

# ── LLM (narrative title / summary) ──────────────────────────────────────────
LLM_PROVIDER: str   = os.getenv("LLM_PROVIDER",   "google")
LLM_MODEL_NAME: str = os.getenv("LLM_MODEL_NAME", "gemini-2.0-flash")
GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
# No API calls are made unless USE_STUB_LLM=false and GEMINI_API_KEY is set.
USE_STUB_LLM: bool = _flag("USE_STUB_LLM", "true")
# Transport-level timeout handed to the provider SDK (seconds).
LLM_HTTP_TIMEOUT_SECONDS: float = float(os.getenv("LLM_HTTP_TIMEOUT_SECONDS", "30"))
# Hard budget the assembler waits for a narrative before using the fallback.
NARRATIVE_TIMEOUT_SECONDS: float = float(os.getenv("NARRATIVE_TIMEOUT_SECONDS", "8"))
NARRATIVE_MAX_WORKERS: int       = int(os.getenv("NARRATIVE_MAX_WORKERS", "4"))

# ── Backends ──────────────────────────────────────────────────────────────────
CATALOG_BACKEND: str = os.getenv("CATALOG_BACKEND", "stub")     # "stub" | "postgres"
STORE_BACKEND: str   = os.getenv("STORE_BACKEND",   "memory")   # "memory" | "redis"
# Event served when a request omits the race slug (stub catalog default).
DEFAULT_RACE_SLUG: str = os.getenv("DEFAULT_RACE_SLUG", "melbourne-2026")

# ── Itinerary identifiers ────────────────────────────────────────────────────
# 9 random bytes -> 12 URL-safe characters.
ITINERARY_ID_BYTES: int        = int(os.getenv("ITINERARY_ID_BYTES", "9"))
ITINERARY_ID_MAX_ATTEMPTS: int = int(os.getenv("ITINERARY_ID_MAX_ATTEMPTS", "5"))

# ── PostgreSQL (catalog) ─────────────────────────────────────────────────────
POSTGRES_HOST: str     = os.getenv("POSTGRES_HOST",     "localhost")
POSTGRES_PORT: int     = int(os.getenv("POSTGRES_PORT", "5432"))
POSTGRES_DB: str       = os.getenv("POSTGRES_DB",       "pitlane")
POSTGRES_USER: str     = os.getenv("POSTGRES_USER",     "pitlane_user")
POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "pitlane_pass")
POSTGRES_MIN_CONN: int = int(os.getenv("POSTGRES_MIN_CONN", "1"))
POSTGRES_MAX_CONN: int = int(os.getenv("POSTGRES_MAX_CONN", "10"))

# ── Redis (itinerary store) ──────────────────────────────────────────────────
REDIS_HOST: str     = os.getenv("REDIS_HOST",     "localhost")
REDIS_PORT: int     = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DB: int       = int(os.getenv("REDIS_DB",   "0"))
REDIS_PASSWORD: str = os.getenv("REDIS_PASSWORD", "")
# Stored itineraries expire after 90 days; 0 disables expiry.
ITINERARY_TTL: int  = int(os.getenv("ITINERARY_TTL", "7776000"))

# ── HTTP ─────────────────────────────────────────────────────────────────────
CORS_ALLOW_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
]

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
# JSONL event logs; defaults to <repo>/logs
LOGS_DIR: str  = os.getenv("LOGS_DIR", "")
