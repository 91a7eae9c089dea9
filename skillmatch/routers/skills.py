from fastapi import APIRouter, Request

from skillmatch.models.requests import SkillPreviewInput
from skillmatch.models.response import SkillPreviewResponse
from skillmatch.models.settings import SkillVocabulary
from skillmatch.services import extractor
from skillmatch.services.settings import get_settings
from skillmatch.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/extract", response_model=SkillPreviewResponse)
async def preview_skills(payload: SkillPreviewInput, request: Request):
    """Interactive skill extraction feedback for pasted text"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    validity = extractor.is_valid_for_extraction(payload.text)

    if not validity.valid and not payload.force:
        logger.debug(f"Skipping extraction: {validity.reason}", extra={"request_id": request_id})
        return SkillPreviewResponse(valid=False, reason=validity.reason)

    return SkillPreviewResponse(
        valid=validity.valid,
        reason=validity.reason,
        profile=extractor.extract(payload.text),
    )


@router.get("/vocabulary", response_model=SkillVocabulary)
async def get_vocabulary():
    """Active skill vocabularies"""
    return get_settings().vocabulary
