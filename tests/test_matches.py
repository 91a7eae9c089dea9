import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch
from pymongo.errors import DuplicateKeyError
from datetime import datetime

from skillmatch.models.skills import MatchRecord, MatchStatus
from skillmatch.services.match_manager import MatchManager


@pytest.fixture
def test_app():
    from fastapi import FastAPI
    from skillmatch.routers import matches

    app = FastAPI()
    app.include_router(matches.router, prefix="/matches")
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


@pytest.fixture
def resume_doc(frontend_profile):
    return {
        "_id": "mongo-resume",
        "resume_id": "resume-1",
        "filename": "jane.pdf",
        "raw_text": "Jane Doe",
        "profile": frontend_profile.model_dump(),
        "uploaded_at": datetime.utcnow(),
    }


@pytest.fixture
def job_doc(sample_job_description):
    return {
        "_id": "mongo-job",
        "job_id": "job-1",
        "title": "Senior Frontend Engineer",
        "company": "Tech Corp",
        "description": sample_job_description,
        "required_skills": ["React", "TypeScript", "GraphQL"],
        "created_at": datetime.utcnow(),
    }


def _match_doc(**overrides):
    doc = {
        "_id": "mongo-match",
        "match_id": "match-1",
        "resume_id": "resume-1",
        "job_id": "job-1",
        "overall_score": 50,
        "technical_score": 40,
        "experience_score": 60,
        "cultural_score": 60,
        "matched_skills": [],
        "missing_skills": ["React"],
        "strengths": [],
        "concerns": ["Missing experience with: React"],
        "status": "not_qualified",
        "status_overridden": False,
        "created_at": datetime(2024, 1, 1),
        "updated_at": datetime(2024, 1, 1),
    }
    doc.update(overrides)
    return doc


class InMemoryMatches:
    """Just enough of a motor collection for the match upsert flow"""

    def __init__(self, docs=None):
        self.docs = [dict(d) for d in docs or []]
        self.update_calls = []

    @staticmethod
    def _matches(doc, query):
        for key, cond in query.items():
            if isinstance(cond, dict):
                if doc.get(key) == cond["$ne"]:
                    return False
            elif doc.get(key) != cond:
                return False
        return True

    async def find_one(self, query):
        return next((dict(d) for d in self.docs if self._matches(d, query)), None)

    async def update_one(self, query, update, upsert=False):
        self.update_calls.append((query, update, upsert))
        doc = next((d for d in self.docs if self._matches(d, query)), None)
        if doc is None:
            if not upsert:
                return MagicMock(matched_count=0)
            doc = {k: v for k, v in query.items() if not isinstance(v, dict)}
            doc.update(update.get("$setOnInsert", {}))
            self.docs.append(doc)
        doc.update(update.get("$set", {}))
        return MagicMock(matched_count=1)


class ReviewerOverridesDuringRescore(InMemoryMatches):
    """A reviewer's status change lands right after the scores are written"""

    async def update_one(self, query, update, upsert=False):
        result = await super().update_one(query, update, upsert)
        if upsert:
            self.docs[0].update({"status": "under_review", "status_overridden": True})
        return result


class ConcurrentFirstInsert(InMemoryMatches):
    """Another request inserts the pair between our lookup and our upsert"""

    def __init__(self, docs=None):
        super().__init__(docs)
        self.raced = False

    async def update_one(self, query, update, upsert=False):
        if upsert and not self.raced:
            self.raced = True
            await super().update_one(query, update, upsert=True)
            raise DuplicateKeyError("E11000 duplicate key error collection: matches")
        return await super().update_one(query, update, upsert)


@pytest.fixture
def stored_pair(resume_doc, job_doc):
    """Patch resume and job lookups; yields a function installing a matches collection"""
    with patch('skillmatch.services.match_manager.resumes_coll') as mock_resumes_coll, \
            patch('skillmatch.services.match_manager.jobs_coll') as mock_jobs_coll:
        mock_resumes_coll.find_one = AsyncMock(return_value=resume_doc)
        mock_jobs_coll.find_one = AsyncMock(return_value=job_doc)

        patchers = []

        def install(collection):
            patcher = patch('skillmatch.services.match_manager.matches_coll', collection)
            patcher.start()
            patchers.append(patcher)
            return collection

        yield install
        for patcher in patchers:
            patcher.stop()


class TestCreateMatch:
    """Scoring and persisting resume/job matches"""

    def test_create_match_success(self, client, stored_pair):
        """Test scoring a new resume/job pair"""
        matches = stored_pair(InMemoryMatches())

        response = client.post("/matches/", json={"resume_id": "resume-1", "job_id": "job-1"})

        assert response.status_code == 200
        data = response.json()
        assert data["match_id"]
        assert data["overall_score"] == 82
        assert data["technical_score"] == 74
        assert data["status"] == "qualified"
        assert data["status_overridden"] is False
        assert data["matched_skills"] == ["React", "TypeScript"]
        assert data["missing_skills"] == ["GraphQL"]

        assert len(matches.docs) == 1
        assert matches.docs[0]["status"] == "qualified"
        assert matches.docs[0]["resume_id"] == "resume-1"

    @patch('skillmatch.services.match_manager.jobs_coll')
    @patch('skillmatch.services.match_manager.resumes_coll')
    def test_create_match_resume_not_found(self, mock_resumes_coll, mock_jobs_coll, client):
        mock_resumes_coll.find_one = AsyncMock(return_value=None)
        mock_jobs_coll.find_one = AsyncMock()

        response = client.post("/matches/", json={"resume_id": "missing", "job_id": "job-1"})

        assert response.status_code == 404
        assert response.json()["detail"]["error"]["details"]["resource"] == "resume"
        mock_jobs_coll.find_one.assert_not_called()

    @patch('skillmatch.services.match_manager.jobs_coll')
    @patch('skillmatch.services.match_manager.resumes_coll')
    def test_create_match_job_not_found(self, mock_resumes_coll, mock_jobs_coll, client, resume_doc):
        mock_resumes_coll.find_one = AsyncMock(return_value=resume_doc)
        mock_jobs_coll.find_one = AsyncMock(return_value=None)

        response = client.post("/matches/", json={"resume_id": "resume-1", "job_id": "missing"})

        assert response.status_code == 404
        assert response.json()["detail"]["error"]["details"]["resource"] == "job"

    def test_rescore_updates_existing_match(self, client, stored_pair):
        """Test that re-scoring a pair refreshes the stored record in place"""
        matches = stored_pair(InMemoryMatches([_match_doc()]))

        response = client.post("/matches/", json={"resume_id": "resume-1", "job_id": "job-1"})

        assert response.status_code == 200
        data = response.json()
        assert data["match_id"] == "match-1"
        assert data["overall_score"] == 82
        assert data["status"] == "qualified"
        assert len(matches.docs) == 1
        assert matches.docs[0]["created_at"] == datetime(2024, 1, 1)

    def test_rescore_keeps_manual_status(self, client, stored_pair):
        """Test that a reviewer's status survives re-scoring"""
        stored_pair(InMemoryMatches([_match_doc(status_overridden=True)]))

        response = client.post("/matches/", json={"resume_id": "resume-1", "job_id": "job-1"})

        assert response.status_code == 200
        data = response.json()
        assert data["overall_score"] == 82
        assert data["status"] == "not_qualified"
        assert data["status_overridden"] is True

    def test_status_write_is_guarded_by_override_flag(self, client, stored_pair):
        """Test that only the guarded update touches the status field"""
        matches = stored_pair(InMemoryMatches([_match_doc()]))

        client.post("/matches/", json={"resume_id": "resume-1", "job_id": "job-1"})

        status_writes = [(q, u) for q, u, _ in matches.update_calls if "status" in u.get("$set", {})]
        assert status_writes == [(
            {"resume_id": "resume-1", "job_id": "job-1", "status_overridden": {"$ne": True}},
            {"$set": {"status": "qualified"}},
        )]
        for _, update, _ in matches.update_calls:
            assert "status_overridden" not in update.get("$set", {})

    def test_override_landing_mid_rescore_is_kept(self, client, stored_pair):
        """Test that an override made while re-scoring is in flight is not reverted"""
        matches = stored_pair(ReviewerOverridesDuringRescore([_match_doc()]))

        response = client.post("/matches/", json={"resume_id": "resume-1", "job_id": "job-1"})

        assert response.status_code == 200
        assert matches.docs[0]["status_overridden"] is True
        assert matches.docs[0]["status"] == "under_review"
        assert matches.docs[0]["overall_score"] == 82
        assert response.json()["status_overridden"] is True

    def test_concurrent_first_scoring_is_not_an_error(self, client, stored_pair):
        """Test that losing the insert race to another request still succeeds"""
        matches = stored_pair(ConcurrentFirstInsert())

        response = client.post("/matches/", json={"resume_id": "resume-1", "job_id": "job-1"})

        assert response.status_code == 200
        assert response.json()["overall_score"] == 82
        assert len(matches.docs) == 1
        retry_query, _, retry_upsert = matches.update_calls[1]
        assert retry_query == {"resume_id": "resume-1", "job_id": "job-1"}
        assert retry_upsert is False

    def test_create_match_invalid_payload(self, client):
        response = client.post("/matches/", json={"resume_id": "resume-1"})

        assert response.status_code == 422


class TestMatchQueries:
    """Listing, fetching, deleting and exporting matches"""

    @patch('skillmatch.routers.matches.matches_coll')
    def test_list_matches_with_filters(self, mock_matches_coll, client):
        """Test filtering by job and status, best score first"""
        cursor = MagicMock()
        cursor.sort = MagicMock(return_value=cursor)
        cursor.to_list = AsyncMock(return_value=[_match_doc(status="qualified", overall_score=90)])
        mock_matches_coll.find = MagicMock(return_value=cursor)

        response = client.get("/matches/all?job_id=job-1&status=qualified")

        assert response.status_code == 200
        assert len(response.json()) == 1
        mock_matches_coll.find.assert_called_once_with({"job_id": "job-1", "status": "qualified"})
        cursor.sort.assert_called_once_with("overall_score", -1)

    def test_list_matches_invalid_status(self, client):
        response = client.get("/matches/all?status=hired")

        assert response.status_code == 422

    @patch('skillmatch.routers.matches.matches_coll')
    def test_get_match_not_found(self, mock_matches_coll, client):
        mock_matches_coll.find_one = AsyncMock(return_value=None)

        response = client.get("/matches/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Match not found"

    @patch('skillmatch.routers.matches.matches_coll')
    def test_get_match_success(self, mock_matches_coll, client):
        mock_matches_coll.find_one = AsyncMock(return_value=_match_doc())

        response = client.get("/matches/match-1")

        assert response.status_code == 200
        assert response.json()["status"] == "not_qualified"

    @patch('skillmatch.routers.matches.matches_coll')
    def test_delete_match(self, mock_matches_coll, client):
        mock_matches_coll.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))

        response = client.delete("/matches/match-1")

        assert response.status_code == 200
        assert response.json() == {"message": "Match deleted successfully", "match_id": "match-1"}

    @patch('skillmatch.routers.matches.matches_coll')
    def test_delete_match_not_found(self, mock_matches_coll, client):
        mock_matches_coll.delete_one = AsyncMock(return_value=MagicMock(deleted_count=0))

        response = client.delete("/matches/missing")

        assert response.status_code == 404

    @patch('skillmatch.routers.matches.jobs_coll')
    @patch('skillmatch.routers.matches.resumes_coll')
    @patch('skillmatch.routers.matches.matches_coll')
    def test_export_match(self, mock_matches_coll, mock_resumes_coll, mock_jobs_coll, client, resume_doc, job_doc):
        mock_matches_coll.find_one = AsyncMock(return_value=_match_doc())
        mock_resumes_coll.find_one = AsyncMock(return_value=resume_doc)
        mock_jobs_coll.find_one = AsyncMock(return_value=job_doc)

        response = client.get("/matches/match-1/export")

        assert response.status_code == 200
        data = response.json()
        assert data["candidate_name"] == "Jane Doe"
        assert data["job_title"] == "Senior Frontend Engineer"
        assert data["missing_skills"] == ["React"]
        assert "exported_at" in data

    @patch('skillmatch.routers.matches.jobs_coll')
    @patch('skillmatch.routers.matches.resumes_coll')
    @patch('skillmatch.routers.matches.matches_coll')
    def test_export_match_unknown_candidate(self, mock_matches_coll, mock_resumes_coll, mock_jobs_coll, client):
        mock_matches_coll.find_one = AsyncMock(return_value=_match_doc())
        mock_resumes_coll.find_one = AsyncMock(return_value=None)
        mock_jobs_coll.find_one = AsyncMock(return_value=None)

        response = client.get("/matches/match-1/export")

        assert response.status_code == 200
        assert response.json()["candidate_name"] == "Unknown Candidate"
        assert response.json()["job_title"] is None


class TestStatusOverride:
    """Manual reviewer decisions"""

    @patch('skillmatch.services.match_manager.matches_coll')
    def test_update_status(self, mock_matches_coll, client):
        mock_matches_coll.find_one_and_update = AsyncMock(
            return_value=_match_doc(status="qualified", status_overridden=True)
        )

        response = client.patch("/matches/match-1/status", json={"status": "qualified"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "qualified"
        assert data["status_overridden"] is True

        query, update = mock_matches_coll.find_one_and_update.call_args[0]
        assert query == {"match_id": "match-1"}
        assert update["$set"]["status"] == "qualified"
        assert update["$set"]["status_overridden"] is True

    @patch('skillmatch.services.match_manager.matches_coll')
    def test_update_status_not_found(self, mock_matches_coll, client):
        mock_matches_coll.find_one_and_update = AsyncMock(return_value=None)

        response = client.patch("/matches/missing/status", json={"status": "under_review"})

        assert response.status_code == 404

    def test_update_status_invalid_value(self, client):
        response = client.patch("/matches/match-1/status", json={"status": "hired"})

        assert response.status_code == 422


class TestRescoreUpdate:

    def test_status_is_not_part_of_the_upsert(self):
        record = MatchRecord(
            overall_score=85, technical_score=90, experience_score=80, cultural_score=80,
            status=MatchStatus.QUALIFIED,
        )
        now = datetime(2024, 6, 1)
        update = MatchManager.rescore_update(record, "match-9", now)

        assert "status" not in update["$set"]
        assert "status_overridden" not in update["$set"]
        assert update["$set"]["overall_score"] == 85
        assert update["$set"]["updated_at"] == now
        assert update["$setOnInsert"] == {"match_id": "match-9", "status_overridden": False, "created_at": now}
