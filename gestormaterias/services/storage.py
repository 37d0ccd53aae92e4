"""S3-compatible blob store for class materials.

Objects live under ``materia_<id>/<timestamp-ms>_<filename>`` and are
served through long-lived presigned GET URLs.
"""
from __future__ import annotations

import logging
import time
from typing import IO
from urllib.parse import unquote, urlparse

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


def object_key(materia_id: int, filename: str, *, now_ms: int | None = None) -> str:
    timestamp = int(time.time() * 1000) if now_ms is None else int(now_ms)
    safe_name = secure_filename(filename or "") or "archivo"
    return f"materia_{int(materia_id)}/{timestamp}_{safe_name}"


class BlobStore:
    def __init__(
        self,
        *,
        bucket: str,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str = "auto",
        signed_url_ttl: int = 31536000,
    ) -> None:
        self.bucket = bucket
        self.signed_url_ttl = int(signed_url_ttl)
        cfg = Config(signature_version="s3v4", s3={"addressing_style": "path"})
        self._client = boto3.client(
            "s3",
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            endpoint_url=endpoint_url,
            region_name=region,
            config=cfg,
        )

    def upload(self, materia_id: int, filename: str, stream: IO[bytes], content_type: str | None = None) -> tuple[str, str]:
        """Upload and return ``(key, signed_url)``. Never overwrites."""
        key = object_key(materia_id, filename)
        extra = {"CacheControl": "max-age=3600"}
        if content_type:
            extra["ContentType"] = content_type
        try:
            self._client.upload_fileobj(stream, self.bucket, key, ExtraArgs=extra)
            url = self.signed_url(key)
        except (BotoCoreError, ClientError) as exc:
            logger.exception("upload failed key=%s", key)
            raise StorageError("Error al subir el archivo") from exc
        logger.info("uploaded key=%s", key)
        return key, url

    def signed_url(self, key: str, expires: int | None = None) -> str:
        return self._client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=int(expires or self.signed_url_ttl),
        )

    def delete(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.exception("delete failed key=%s", key)
            raise StorageError("Error al eliminar el archivo") from exc
        logger.info("deleted key=%s", key)

    def key_from_url(self, url: str) -> str | None:
        if not url:
            return None
        path = unquote(urlparse(url).path or "/").lstrip("/")
        marker = f"{self.bucket}/"
        if marker in path:
            return path.split(marker, 1)[1] or None
        return None


def get_blob_store() -> BlobStore:
    store = current_app.extensions.get("blob_store")
    if store is None:
        cfg = current_app.config
        store = BlobStore(
            bucket=cfg["STORAGE_BUCKET"],
            endpoint_url=cfg.get("STORAGE_ENDPOINT"),
            access_key=cfg.get("STORAGE_ACCESS_KEY"),
            secret_key=cfg.get("STORAGE_SECRET_KEY"),
            region=cfg.get("STORAGE_REGION", "auto"),
            signed_url_ttl=cfg.get("SIGNED_URL_TTL", 31536000),
        )
        current_app.extensions["blob_store"] = store
    return store


def delete_quietly(key: str | None, url: str | None = None) -> None:
    """Best-effort removal of a stored file; failures are logged only."""
    store = get_blob_store()
    resolved = key or (store.key_from_url(url) if url else None)
    if not resolved:
        return
    try:
        store.delete(resolved)
    except StorageError:
        logger.warning("could not delete stored file key=%s", resolved)
