# product_api/config.py
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from product_api.errors import ConfigError

BACKENDS = ("mongo", "memory")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    port: int = 3000
    host: str = "0.0.0.0"
    mongo_uri: Optional[str] = None
    db_name: str = "shop"
    collection_name: str = "products"
    store_backend: str = "mongo"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.
        When `environ` is omitted the process environment is used, after
        loading a .env file if one exists.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        backend = environ.get("STORE_BACKEND", "mongo").strip().lower()
        if backend not in BACKENDS:
            raise ConfigError(f"STORE_BACKEND must be one of {', '.join(BACKENDS)}")

        mongo_uri = environ.get("MONGO_URI", "").strip() or None
        if backend == "mongo" and not mongo_uri:
            raise ConfigError("Missing MONGO_URI in environment variables.")

        raw_port = environ.get("PORT", "3000")
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigError(f"PORT must be an integer, got {raw_port!r}")

        log_level = environ.get("LOG_LEVEL", "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ConfigError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

        return cls(
            port=port,
            host=environ.get("HOST", "0.0.0.0"),
            mongo_uri=mongo_uri,
            db_name=environ.get("DB_NAME") or "shop",
            collection_name=environ.get("COLLECTION_NAME") or "products",
            store_backend=backend,
            log_level=log_level,
        )
