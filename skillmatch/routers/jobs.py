import uuid
from typing import List

from fastapi import APIRouter, HTTPException, Request

from skillmatch.models.requests import JobCreateInput
from skillmatch.models.schemas import JobModel
from skillmatch.models.skills import JobRequirement
from skillmatch.services import extractor
from skillmatch.services.db import jobs_coll
from skillmatch.utils.exceptions import ExceptionContext, SkillMatchError, map_to_http_exception
from skillmatch.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/", response_model=JobModel)
async def create_job(payload: JobCreateInput, request: Request):
    """Create a job posting; required skills are derived from the description unless given"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    if payload.required_skills is None:
        skills = extractor.derive_required_skills(payload.description)
        logger.info(f"Derived {len(skills)} required skills for '{payload.title}'", extra={"request_id": request_id})
    else:
        skills = payload.required_skills

    # normalizes to an ordered, de-duplicated set of at most 10 skills
    requirement = JobRequirement(
        title=payload.title,
        company=payload.company,
        description_text=payload.description,
        required_skills=skills,
    )

    job = JobModel(
        job_id=str(uuid.uuid4()),
        title=payload.title,
        company=payload.company,
        description=payload.description,
        required_skills=requirement.required_skills,
    )

    try:
        with ExceptionContext("insert_job", logger, request_id=request_id, job_id=job.job_id):
            await jobs_coll.insert_one(job.model_dump())
    except SkillMatchError as e:
        raise map_to_http_exception(e)

    logger.info(f"Created job {job.job_id}: {job.title} at {job.company}", extra={"request_id": request_id})
    return job


@router.get("/all", response_model=List[JobModel])
async def list_all_jobs():
    """Get all job postings"""
    cursor = jobs_coll.find({})
    jobs = await cursor.to_list(length=None)
    return [JobModel(**job) for job in jobs]


@router.get("/{job_id}", response_model=JobModel)
async def get_job(job_id: str):
    """Fetch a job posting by ID"""
    job = await jobs_coll.find_one({"job_id": job_id})
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobModel(**job)
