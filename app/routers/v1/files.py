"""Serves stored documents at the URLs recorded on tracking-file rows."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from app.core.exceptions import NotFoundError
from app.services.storage import LocalBucketStorage, get_storage

router = APIRouter(prefix="/files", tags=["Files"])


@router.get("/{bucket}/{key:path}")
async def get_file(
    bucket: str,
    key: str,
    storage: LocalBucketStorage = Depends(get_storage),
):
    if bucket != storage.bucket:
        raise NotFoundError("Bucket", bucket)
    media_type = "application/pdf" if key.endswith(".pdf") else "application/octet-stream"
    return FileResponse(storage.file_path(key), media_type=media_type)
