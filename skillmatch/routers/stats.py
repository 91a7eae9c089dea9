from fastapi import APIRouter

from skillmatch.models.response import StatsResponse
from skillmatch.models.skills import MatchStatus
from skillmatch.services.db import jobs_coll, matches_coll, resumes_coll
from skillmatch.utils.logging_config import PerformanceMonitor, get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=StatsResponse)
async def get_stats():
    """Dashboard totals across resumes, jobs and matches"""
    with PerformanceMonitor("get_stats", logger):
        total_resumes = await resumes_coll.count_documents({})
        total_jobs = await jobs_coll.count_documents({})

        cursor = matches_coll.find({}, {"overall_score": 1, "status": 1})
        matches = await cursor.to_list(length=None)

    status_counts = {status.value: 0 for status in MatchStatus}
    for match in matches:
        status = match.get("status")
        if status in status_counts:
            status_counts[status] += 1

    scores = [m["overall_score"] for m in matches if "overall_score" in m]
    avg_score = round(sum(scores) / len(scores), 1) if scores else 0.0

    return StatsResponse(
        total_resumes=total_resumes,
        total_jobs=total_jobs,
        total_matches=len(matches),
        avg_match_score=avg_score,
        status_counts=status_counts,
    )
