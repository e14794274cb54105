"""Page routes: server-side rendered HTML pages."""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from core.config import get_settings
from core.storage import ParticipantStore
from core.templates import templates
from services.certificates_service import get_recent_certificates

router = APIRouter(tags=["pages"], include_in_schema=False)


@router.get("/", response_class=HTMLResponse)
async def home_page(request: Request, repo: ParticipantStore) -> HTMLResponse:
    """Home page listing the most recently issued certificates."""
    recent = await get_recent_certificates(repo)

    return templates.TemplateResponse(
        request,
        "pages/home.html",
        {
            "recent": recent,
            "org_name": get_settings().org_display_name,
        },
    )
