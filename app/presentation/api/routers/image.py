import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from app.application.use_cases.image_fetch import FetchImageUseCase
from app.core.exceptions import get_client_id
from app.presentation.api.dependencies.image import get_fetch_image_use_case

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def fetch_image(
    request: Request,
    q: Optional[str] = None,
    use_case: FetchImageUseCase = Depends(get_fetch_image_use_case),
):
    """Search images for ``q`` and return the first full-size result as JPEG."""
    payload = await use_case.execute(q, client_id=get_client_id(request))
    return Response(content=payload.content, media_type="image/jpeg")
