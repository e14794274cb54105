"""Certificate business logic.

This module handles certificate business logic:
- Participant lookup for the certificate routes
- Public URLs and LinkedIn deep links
- The certificate page context
- Memoized PNG generation (delegating to rendering module)

Routes should delegate all certificate business logic to this module.
"""

import asyncio
from urllib.parse import urlencode

from core.cache import ImageCache
from core.config import Settings
from core.errors import GenerationError, NotFoundError
from core.logger import get_logger
from rendering.certificates import (
    format_certificate_date,
    parse_certificate_date,
)
from rendering.certificates import (
    render_certificate_png as _render_certificate_png,
)
from repositories.participant_repository import ParticipantRepository
from schemas import CertificatePageContext, Participant, RecentCertificate

logger = get_logger(__name__)

LINKEDIN_ADD_TO_PROFILE_URL = "https://www.linkedin.com/profile/add"
LINKEDIN_SHARE_URL = "https://www.linkedin.com/sharing/share-offsite/"

RECENT_LIMIT = 10


def build_cert_url(participant: Participant, settings: Settings) -> str:
    return f"{settings.base_url_resolved}/cert/{participant.id}"


def build_image_url(participant: Participant, settings: Settings) -> str:
    return f"{build_cert_url(participant, settings)}/image"


def build_claim_url(participant: Participant, settings: Settings) -> str:
    """Claim link printed by the importer; no route serves it here."""
    return f"{build_cert_url(participant, settings)}/claim/{participant.claim_key}"


def build_add_to_profile_url(participant: Participant, settings: Settings) -> str:
    """LinkedIn "Add licence or certification" prefill link.

    Issue year and month are left out when the stored date does not parse,
    LinkedIn then asks the member to fill them in.
    """
    params: dict[str, str] = {
        "startTask": "CERTIFICATION_NAME",
        "name": participant.program,
        "organizationName": settings.org_display_name,
    }
    issued = parse_certificate_date(participant.date)
    if issued is not None:
        params["issueYear"] = str(issued.year)
        params["issueMonth"] = str(issued.month)
    params["certUrl"] = build_cert_url(participant, settings)
    params["certId"] = participant.id
    return f"{LINKEDIN_ADD_TO_PROFILE_URL}?{urlencode(params)}"


def build_share_url(participant: Participant, settings: Settings) -> str:
    """LinkedIn share-to-feed link for the public certificate page."""
    params = {"url": build_cert_url(participant, settings)}
    return f"{LINKEDIN_SHARE_URL}?{urlencode(params)}"


def build_certificate_page(
    participant: Participant, settings: Settings
) -> CertificatePageContext:
    return CertificatePageContext(
        name=participant.name,
        date=format_certificate_date(participant.date),
        program=participant.program,
        cert_url=build_cert_url(participant, settings),
        image_url=build_image_url(participant, settings),
        cert_id=participant.id,
        add_to_profile_url=build_add_to_profile_url(participant, settings),
        share_url=build_share_url(participant, settings),
        org_name=settings.org_display_name,
    )


async def get_participant_or_raise(
    repo: ParticipantRepository, participant_id: str
) -> Participant:
    """Look up a participant, re-reading the store.

    Raises:
        NotFoundError: If no participant has this id
        StorageError: If the store cannot be read
    """
    participant = await asyncio.to_thread(repo.find, participant_id)
    if participant is None:
        raise NotFoundError(participant_id)
    return participant


async def get_recent_certificates(
    repo: ParticipantRepository, *, limit: int = RECENT_LIMIT
) -> list[RecentCertificate]:
    """Most recently imported participants, newest first, for the home page."""
    participants = await asyncio.to_thread(repo.recent, limit=limit)
    return [
        RecentCertificate(
            id=p.id,
            name=p.name,
            date=format_certificate_date(p.date),
        )
        for p in participants
    ]


def render_certificate(participant: Participant, settings: Settings) -> bytes:
    """Render a participant's certificate PNG, uncached.

    Raises:
        GenerationError: If the template is missing or drawing fails
    """
    try:
        return _render_certificate_png(
            name=participant.name,
            date_text=format_certificate_date(participant.date),
            template_path=settings.template_image_file,
            font_path=settings.font_path,
            font_bold_path=settings.font_bold_path,
        )
    except (OSError, ValueError) as e:
        raise GenerationError(
            f"Cannot render certificate {participant.id}: {e}"
        ) from e


async def get_certificate_png(
    participant: Participant, cache: ImageCache, settings: Settings
) -> bytes:
    """Get a participant's certificate PNG, rendering it at most once.

    Rendering runs in a thread pool to avoid blocking the event loop since
    Pillow compositing and PNG encoding are CPU-bound. The cached bytes
    are served for the rest of the process lifetime, even if the
    participant record or the template changes.

    Raises:
        GenerationError: If the image cannot be rendered
    """
    cached = cache.get(participant.id)
    if cached is not None:
        return cached

    loop = asyncio.get_running_loop()
    png = await loop.run_in_executor(None, render_certificate, participant, settings)
    cache.set(participant.id, png)

    logger.info(
        "certificate.image.rendered",
        participant_id=participant.id,
        size_bytes=len(png),
        cache_size=len(cache),
    )
    return png
