import motor.motor_asyncio
from pymongo import ASCENDING
import os
from dotenv import load_dotenv

from skillmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

# Load environment variables from .env
load_dotenv()

MONGO_DETAILS = os.getenv("MONGO_DETAILS", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "skillmatch_db")

logger.info(f"Initializing MongoDB connection to database: {DB_NAME}")

# Client connects lazily on first operation
try:
    client = motor.motor_asyncio.AsyncIOMotorClient(MONGO_DETAILS)
    db = client[DB_NAME]
    logger.info("MongoDB client initialized successfully")
except Exception as e:
    logger.error(f"Failed to initialize MongoDB client: {e}")
    raise

# Collections
resumes_coll = db["resumes"]
jobs_coll = db["jobs"]
matches_coll = db["matches"]


async def _ensure_index(coll, keys, **kwargs):
    name = f"{coll.name}.({', '.join(k for k, _ in keys)})"
    try:
        await coll.create_index(keys, **kwargs)
        logger.debug(f"Created index on {name}")
    except Exception as e:
        if "already exists" in str(e).lower():
            logger.debug(f"Index on {name} already exists")
        else:
            logger.warning(f"Could not create index on {name}: {e}")


async def init_indexes():
    """Index initialization for collections."""
    logger.info("Starting database index initialization")

    await _ensure_index(resumes_coll, [("resume_id", ASCENDING)], unique=True)
    await _ensure_index(jobs_coll, [("job_id", ASCENDING)], unique=True)
    await _ensure_index(matches_coll, [("match_id", ASCENDING)], unique=True)
    # one match record per (resume, job) pair; re-scoring updates it in place
    await _ensure_index(matches_coll, [("resume_id", ASCENDING), ("job_id", ASCENDING)], unique=True)
    await _ensure_index(matches_coll, [("status", ASCENDING)])

    logger.info("Database index initialization completed")
