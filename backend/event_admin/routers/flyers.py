"""Flyer upload route. The raw request body is the image."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from event_admin.dependencies import get_storage
from event_admin.storage import ObjectStorage, upload_flyer

logger = logging.getLogger(__name__)
router = APIRouter()


class FlyerUploadResult(BaseModel):
    flyer_url: Optional[str] = None


@router.post("", response_model=FlyerUploadResult)
async def upload(
    request: Request,
    filename: str = Query(..., min_length=1),
    storage: ObjectStorage = Depends(get_storage),
):
    """Store the flyer and return its public URL; ``flyer_url`` is null when the upload failed."""
    data = await request.body()
    return FlyerUploadResult(flyer_url=upload_flyer(storage, filename, data))
