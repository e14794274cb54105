"""Public certificate page and image endpoints.

Route ordering note: /cert/{participant_id}/image is defined before
/cert/{participant_id} so the image path is never treated as a page id.
"""

from fastapi import APIRouter, Request, Response
from fastapi.responses import HTMLResponse, PlainTextResponse

from core.config import get_settings
from core.errors import GenerationError, NotFoundError
from core.logger import get_logger
from core.ratelimit import image_rate_limit, limiter
from core.storage import ImageCacheDep, ParticipantStore
from core.templates import templates
from services.certificates_service import (
    build_certificate_page,
    get_certificate_png,
    get_participant_or_raise,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/cert", tags=["certificates"])

IMAGE_CACHE_CONTROL = "public, max-age=86400"


@router.get(
    "/{participant_id}/image",
    responses={
        200: {"content": {"image/png": {}}, "description": "PNG certificate image"},
        404: {"description": "Certificate not found"},
        500: {"description": "Image generation failed"},
    },
)
@limiter.limit(image_rate_limit)
async def certificate_image(
    request: Request,
    participant_id: str,
    repo: ParticipantStore,
    cache: ImageCacheDep,
) -> Response:
    """Get the PNG image for a certificate."""
    try:
        participant = await get_participant_or_raise(repo, participant_id)
    except NotFoundError:
        return PlainTextResponse("Certificate not found", status_code=404)

    try:
        png_content = await get_certificate_png(participant, cache, get_settings())
    except GenerationError:
        logger.exception(
            "certificate.image.failed",
            participant_id=participant_id,
        )
        return PlainTextResponse(
            "Error generating certificate image", status_code=500
        )

    return Response(
        content=png_content,
        media_type="image/png",
        headers={"Cache-Control": IMAGE_CACHE_CONTROL},
    )


@router.get("/{participant_id}", response_class=HTMLResponse)
async def certificate_page(
    request: Request,
    participant_id: str,
    repo: ParticipantStore,
) -> HTMLResponse:
    """Certificate page with Open Graph tags and LinkedIn buttons."""
    try:
        participant = await get_participant_or_raise(repo, participant_id)
    except NotFoundError:
        return templates.TemplateResponse(
            request,
            "pages/404.html",
            {},
            status_code=404,
        )

    page = build_certificate_page(participant, get_settings())
    return templates.TemplateResponse(
        request,
        "pages/certificate.html",
        page.model_dump(),
    )
