from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import DEFAULT_BUCKET, DEFAULT_SIGNED_URL_TTL


@dataclass(frozen=True)
class Settings:
    secret_key: str
    database_url: str
    log_level: str
    storage_bucket: str
    storage_endpoint: str | None
    storage_access_key: str | None
    storage_secret_key: str | None
    storage_region: str
    signed_url_ttl: int
    max_upload_mb: int

    @staticmethod
    def from_env() -> "Settings":
        secret_key = os.environ.get("SECRET_KEY", "dev-secret-key")
        database_url = os.environ.get("DATABASE_URL", "sqlite:///instance/gestormaterias.sqlite3")
        try:
            signed_url_ttl = int(os.environ.get("SIGNED_URL_TTL", DEFAULT_SIGNED_URL_TTL))
        except ValueError:
            signed_url_ttl = DEFAULT_SIGNED_URL_TTL
        try:
            max_upload_mb = int(os.environ.get("MAX_UPLOAD_MB", "20"))
        except ValueError:
            max_upload_mb = 20
        return Settings(
            secret_key=secret_key,
            database_url=database_url,
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            storage_bucket=os.environ.get("STORAGE_BUCKET", DEFAULT_BUCKET),
            storage_endpoint=os.environ.get("STORAGE_ENDPOINT") or None,
            storage_access_key=os.environ.get("STORAGE_ACCESS_KEY") or None,
            storage_secret_key=os.environ.get("STORAGE_SECRET_KEY") or None,
            storage_region=os.environ.get("STORAGE_REGION", "auto"),
            signed_url_ttl=signed_url_ttl,
            max_upload_mb=max_upload_mb,
        )
