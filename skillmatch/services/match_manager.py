"""
Match Management Service: scoring resume/job pairs and reviewer status overrides
"""
from datetime import datetime
from typing import Any, Dict
import uuid

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from skillmatch.models.schemas import JobModel, MatchModel, ResumeModel
from skillmatch.models.skills import MatchRecord, MatchStatus
from skillmatch.services import matching
from skillmatch.services.db import jobs_coll, matches_coll, resumes_coll
from skillmatch.utils.exceptions import NotFoundError
from skillmatch.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)


class MatchManager:
    """Creates, refreshes and overrides match records"""

    @staticmethod
    def rescore_update(record: MatchRecord, match_id: str, now: datetime) -> Dict[str, Any]:
        """
        Upsert document for fresh scores of a (resume, job) pair.

        Status is left out; it is written separately so that a reviewer's
        override is never overwritten.
        """
        return {
            "$set": {**record.model_dump(exclude={"status"}), "updated_at": now},
            "$setOnInsert": {
                "match_id": match_id,
                "status_overridden": False,
                "created_at": now,
            },
        }

    @staticmethod
    @log_function_call
    async def create_match(resume_id: str, job_id: str) -> MatchModel:
        """Score a resume against a job; re-scoring a pair updates its record in place"""
        resume_doc = await resumes_coll.find_one({"resume_id": resume_id})
        if not resume_doc:
            raise NotFoundError(f"Resume {resume_id} not found", resource="resume", resource_id=resume_id)

        job_doc = await jobs_coll.find_one({"job_id": job_id})
        if not job_doc:
            raise NotFoundError(f"Job {job_id} not found", resource="job", resource_id=job_id)

        resume = ResumeModel(**resume_doc)
        job = JobModel(**job_doc)
        record = matching.score(resume.profile, job.to_requirement())

        pair = {"resume_id": resume_id, "job_id": job_id}
        update = MatchManager.rescore_update(record, str(uuid.uuid4()), datetime.utcnow())
        try:
            await matches_coll.update_one(pair, update, upsert=True)
        except DuplicateKeyError:
            # a concurrent request inserted the pair first
            await matches_coll.update_one(pair, update)

        # only reaches records without a manual override
        await matches_coll.update_one(
            {**pair, "status_overridden": {"$ne": True}},
            {"$set": {"status": record.status}}
        )

        stored = await matches_coll.find_one(pair)
        match = MatchModel(**stored)
        logger.info(
            f"Scored match {match.match_id} ({resume_id} x {job_id}): {record.overall_score}, "
            f"status {match.status}{' (manual)' if match.status_overridden else ''}"
        )
        return match

    @staticmethod
    @log_function_call
    async def update_status(match_id: str, status: MatchStatus) -> MatchModel:
        """Record a reviewer's manual status decision"""
        updated = await matches_coll.find_one_and_update(
            {"match_id": match_id},
            {
                "$set": {
                    "status": MatchStatus(status).value,
                    "status_overridden": True,
                    "updated_at": datetime.utcnow()
                }
            },
            return_document=ReturnDocument.AFTER
        )
        if not updated:
            raise NotFoundError(f"Match {match_id} not found", resource="match", resource_id=match_id)

        logger.info(f"Match {match_id} status manually set to {updated['status']}")
        return MatchModel(**updated)
