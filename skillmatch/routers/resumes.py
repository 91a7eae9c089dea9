import asyncio
import uuid
from typing import List

from fastapi import APIRouter, HTTPException, Request

from skillmatch.helpers.parsing import clean_text, decode_base64, extract_document_text
from skillmatch.models.requests import ResumeUploadInput
from skillmatch.models.schemas import ResumeModel
from skillmatch.services import extractor
from skillmatch.services.db import resumes_coll
from skillmatch.utils.exceptions import ExceptionContext, SkillMatchError, map_to_http_exception
from skillmatch.utils.logging_config import PerformanceMonitor, get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/", response_model=ResumeModel)
async def upload_resume(payload: ResumeUploadInput, request: Request):
    """Parse a resume, extract its skill profile and store it"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    logger.info(f"Ingesting resume {payload.filename}", extra={"request_id": request_id})

    try:
        if payload.text is not None:
            text = clean_text(payload.text)
        else:
            data = decode_base64(payload.base64_content)
            loop = asyncio.get_running_loop()
            text = await loop.run_in_executor(None, extract_document_text, payload.filename, data)
    except SkillMatchError as e:
        logger.warning(f"Rejected resume {payload.filename}: {e.message}", extra={"request_id": request_id})
        raise map_to_http_exception(e)

    with PerformanceMonitor("extract_resume_profile", logger):
        profile = extractor.extract(text)

    resume = ResumeModel(
        resume_id=str(uuid.uuid4()),
        filename=payload.filename,
        raw_text=text,
        profile=profile,
    )

    try:
        with ExceptionContext("insert_resume", logger, request_id=request_id, resume_id=resume.resume_id):
            await resumes_coll.insert_one(resume.model_dump())
    except SkillMatchError as e:
        raise map_to_http_exception(e)

    logger.info(
        f"Stored resume {resume.resume_id} with {len(profile.all_skill_names())} skills",
        extra={"request_id": request_id, "resume_id": resume.resume_id}
    )
    return resume


@router.get("/all", response_model=List[ResumeModel])
async def list_all_resumes():
    """Get all resumes in the system"""
    cursor = resumes_coll.find({})
    resumes = await cursor.to_list(length=None)
    return [ResumeModel(**resume) for resume in resumes]


@router.get("/{resume_id}", response_model=ResumeModel)
async def get_resume(resume_id: str):
    """Fetch a resume by ID"""
    resume = await resumes_coll.find_one({"resume_id": resume_id})
    if not resume:
        logger.warning(f"Resume not found: {resume_id}")
        raise HTTPException(status_code=404, detail="Resume not found")
    return ResumeModel(**resume)
