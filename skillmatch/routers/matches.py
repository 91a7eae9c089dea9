# routers/matches.py
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request

from skillmatch.models.requests import MatchCreateInput, StatusUpdatePayload
from skillmatch.models.response import MatchExport
from skillmatch.models.schemas import MatchModel
from skillmatch.models.skills import MatchStatus
from skillmatch.services.db import jobs_coll, matches_coll, resumes_coll
from skillmatch.services.match_manager import MatchManager
from skillmatch.utils.exceptions import ExceptionContext, SkillMatchError, map_to_http_exception
from skillmatch.utils.logging_config import PerformanceMonitor, get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/", response_model=MatchModel)
async def create_match(payload: MatchCreateInput, request: Request):
    """Score a resume against a job; re-scoring keeps a manually set status"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    with PerformanceMonitor("create_match", logger):
        try:
            with ExceptionContext("create_match", logger, request_id=request_id,
                                  resume_id=payload.resume_id, job_id=payload.job_id):
                return await MatchManager.create_match(payload.resume_id, payload.job_id)
        except SkillMatchError as e:
            raise map_to_http_exception(e)


@router.get("/all", response_model=List[MatchModel])
async def list_matches(
    job_id: Optional[str] = Query(None, description="Only matches for this job"),
    status: Optional[MatchStatus] = Query(None, description="Only matches with this status"),
):
    """Get matches, best overall score first"""
    query = {}
    if job_id:
        query["job_id"] = job_id
    if status:
        query["status"] = status.value

    cursor = matches_coll.find(query).sort("overall_score", -1)
    matches = await cursor.to_list(length=None)
    return [MatchModel(**match) for match in matches]


@router.get("/{match_id}", response_model=MatchModel)
async def get_match(match_id: str):
    match = await matches_coll.find_one({"match_id": match_id})
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    return MatchModel(**match)


@router.patch("/{match_id}/status", response_model=MatchModel)
async def update_match_status(match_id: str, payload: StatusUpdatePayload, request: Request):
    """Manually override a match status"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.info(f"Status override for match {match_id} -> {payload.status.value}", extra={"request_id": request_id})

    try:
        with ExceptionContext("update_match_status", logger, request_id=request_id, match_id=match_id):
            return await MatchManager.update_status(match_id, payload.status)
    except SkillMatchError as e:
        raise map_to_http_exception(e)


@router.delete("/{match_id}")
async def delete_match(match_id: str):
    result = await matches_coll.delete_one({"match_id": match_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Match not found")
    logger.info(f"Deleted match {match_id}")
    return {"message": "Match deleted successfully", "match_id": match_id}


@router.get("/{match_id}/export", response_model=MatchExport)
async def export_match(match_id: str):
    """Export a match with candidate and job context"""
    match = await matches_coll.find_one({"match_id": match_id})
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")

    resume = await resumes_coll.find_one({"resume_id": match["resume_id"]}) or {}
    job = await jobs_coll.find_one({"job_id": match["job_id"]}) or {}
    candidate_name = (resume.get("profile") or {}).get("candidate_name")

    record = MatchModel(**match)
    return MatchExport(
        match_id=record.match_id,
        candidate_name=candidate_name or "Unknown Candidate",
        job_title=job.get("title"),
        overall_score=record.overall_score,
        technical_score=record.technical_score,
        experience_score=record.experience_score,
        cultural_score=record.cultural_score,
        matched_skills=record.matched_skills,
        missing_skills=record.missing_skills,
        strengths=record.strengths,
        concerns=record.concerns,
        status=record.status,
    )
