"""
config/settings.py
──────────────────
Application configuration loaded from environment variables.
"""
import os
from dataclasses import dataclass


@dataclass
class Settings:
    # Server
    DEBUG: bool = os.getenv("DEBUG", "true").lower() == "true"
    PORT: int = int(os.getenv("PORT", "8050"))
    HOST: str = os.getenv("HOST", "0.0.0.0")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Database (SQLite path, ":memory:" for tests)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "pd_monitor.db")

    # Live refresh of device cards and node status, in milliseconds
    UPDATE_INTERVAL_MS: int = int(os.getenv("UPDATE_INTERVAL_MS", "15000"))

    # Simulation
    SIMULATION_SEED: int = int(os.getenv("SIMULATION_SEED", "42"))
    HISTORY_DAYS: int = int(os.getenv("HISTORY_DAYS", "7"))
    SAMPLE_INTERVAL_MIN: int = int(os.getenv("SAMPLE_INTERVAL_MIN", "15"))

    # i18n
    DEFAULT_LANG: str = os.getenv("DEFAULT_LANG", "zh")

    # Alarms
    ALARM_RETENTION_DAYS: int = int(os.getenv("ALARM_RETENTION_DAYS", "30"))


settings = Settings()
