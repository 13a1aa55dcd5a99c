"""Runtime configuration, read once from the environment."""

import os

DATABASE_URL: str = os.getenv("CUBECHESS_DATABASE_URL", "sqlite:///./cubechess.db")
SQL_ECHO: bool = os.getenv("CUBECHESS_SQL_ECHO", "0").lower() in {"1", "true", "yes"}
LOG_LEVEL: str = os.getenv("CUBECHESS_LOG_LEVEL", "INFO").upper()
