from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from storefront.deps import require_admin
from storefront.schemas.site import ResolvedImage, UploadResponse
from storefront.services.auth import Identity
from storefront.services.storage import get_signed_url, resolve_public_url, upload_file

router = APIRouter(tags=["storage"])

logger = logging.getLogger(__name__)

ALLOWED_UPLOAD_FOLDERS = {"products", "logos", "themes", "uploads"}


@router.get("/api/storage/resolve", response_model=ResolvedImage)
def resolve_image(
    path: str = Query(..., min_length=1),
    bucket: Optional[str] = Query(default=None),
):
    return {
        "public_url": resolve_public_url(path, bucket),
        "signed_url": get_signed_url(path, bucket),
    }


@router.post("/api/admin/storage/upload", response_model=UploadResponse)
def upload_image(
    file: UploadFile = File(...),
    folder: str = Query(default="uploads"),
    _admin: Identity = Depends(require_admin),
):
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid file")
    if not (file.content_type or "").lower().startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unsupported file type")
    if folder not in ALLOWED_UPLOAD_FOLDERS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown upload folder")

    try:
        url = upload_file(file, folder=folder)
    except RuntimeError as exc:
        logger.error("upload rejected: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return {"url": url}
