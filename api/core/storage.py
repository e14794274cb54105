"""FastAPI dependencies for the participant store and the image cache."""

from typing import Annotated

from fastapi import Depends, Request

from core.cache import ImageCache
from core.config import get_settings
from repositories.participant_repository import ParticipantRepository


def get_participant_repository() -> ParticipantRepository:
    """Read-through store; a fresh repository per request, nothing cached."""
    return ParticipantRepository(get_settings().data_file_path)


def get_image_cache(request: Request) -> ImageCache:
    """The process-wide cache created at startup in main.py."""
    return request.app.state.image_cache


ParticipantStore = Annotated[ParticipantRepository, Depends(get_participant_repository)]
ImageCacheDep = Annotated[ImageCache, Depends(get_image_cache)]
