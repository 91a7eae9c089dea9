from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from skillmatch.routers import resumes, jobs, matches, skills, stats

from skillmatch.utils.logging_config import configure_for_environment, get_logger
from skillmatch.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
)
from skillmatch.services.extractor import get_extractor
from skillmatch.services.matching import get_scorer

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("SkillMatch API starting up...")

    # Vocabularies and scoring rules are loaded once and shared by every request
    extractor = get_extractor()
    get_scorer()
    vocab = extractor.vocabulary
    logger.info(
        f"Matcher ready: {len(vocab.technical)} technical, {len(vocab.soft)} soft, {len(vocab.tools)} tool skills"
    )

    try:
        from skillmatch.services.db import init_indexes
        await init_indexes()
        logger.info("Database indexes initialized successfully")
    except Exception as e:
        logger.warning(f"Database index initialization had issues: {e}")
        logger.info("Application will continue - some operations may be slower without indexes")

    logger.info("SkillMatch API startup completed")

    yield

    logger.info("SkillMatch API shutting down...")

app = FastAPI(title="SkillMatch API", version="1.0.0", lifespan=lifespan)

# Add middleware in order (LIFO - Last In, First Out)
# Exception handler should be the outermost middleware
app.add_middleware(PerformanceMiddleware, slow_request_threshold=2.0)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    return {"message": "Welcome to the SkillMatch API", "version": "1.0.0", "status": "ok"}

@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {"status": "healthy"}

app.include_router(resumes.router, prefix="/api/resumes", tags=["resumes"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(matches.router, prefix="/api/matches", tags=["matches"])
app.include_router(skills.router, prefix="/api/skills", tags=["skills"])
app.include_router(stats.router, prefix="/api/stats", tags=["stats"])

logger.info("SkillMatch API initialized successfully")
