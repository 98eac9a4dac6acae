"""
FastAPI server for the Interview Grader platform.

This module provides the REST API used by the candidate dashboard (question
sets and answer submission) and by the admin dashboard (stored interviews and
statistics).
"""
import contextlib
import logging
import random
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from interview_grader import __version__
from interview_grader.core.assembler import SessionAssembler
from interview_grader.core.catalog import RubricCatalog
from interview_grader.core.serializers import to_admin_summary, to_submit_response
from interview_grader.core.statistics import compute_statistics
from interview_grader.core.storage import PersistenceError, ResultStore, create_store
from interview_grader.models.rubric import Part
from interview_grader.models.session import SessionSubmission
from interview_grader.utils.config import get_interview_config, get_server_config, get_storage_config
from interview_grader.utils.constants import (
    ERROR_INTERVIEW_NOT_FOUND,
    ERROR_LOAD_FAILED,
    ERROR_NOT_PENDING,
    ERROR_SAVE_FAILED,
    PART_DESCRIPTIONS,
    PART_TOPICS,
)

logger = logging.getLogger(__name__)

server_config = get_server_config()
RATE_LIMIT = server_config.get("rate_limit", "30/minute")
MAX_PENDING_RESULTS = server_config.get("max_pending_results", 100)

# Setup rate limiter
limiter = Limiter(key_func=get_remote_address)

router = APIRouter()


@contextlib.asynccontextmanager
async def lifespan(app_instance: FastAPI):
    """Load the question bank and open the result store for the app's lifetime."""
    logger.info("Lifespan: Startup phase started.")
    state = app_instance.state
    try:
        if getattr(state, "catalog", None) is None:
            state.catalog = RubricCatalog.default(get_interview_config().get("question_bank"))

        if not hasattr(state, "store"):
            try:
                state.store = create_store(get_storage_config())
            except PersistenceError as e:
                logger.error(f"Lifespan: Result store unavailable: {e}. Submissions will be kept pending.")
                state.store = None

        if getattr(state, "assembler", None) is None:
            state.assembler = SessionAssembler(state.catalog)
        state.pending = {}

        logger.info("Lifespan: Startup phase completed successfully.")
        yield
    finally:
        logger.info("Lifespan: Shutdown phase started.")
        store = getattr(state, "store", None)
        if store is not None:
            store.close()
        pending = getattr(state, "pending", {})
        if pending:
            logger.warning(f"Shutting down with {len(pending)} unpersisted interview result(s): {list(pending)}")
        logger.info("Lifespan: Shutdown phase completed.")


# Dependency for monitoring request timing
async def log_request_time(request: Request):
    request.state.start_time = datetime.now()
    yield
    process_time = (datetime.now() - request.state.start_time).total_seconds() * 1000
    logger.info(f"Request to {request.url.path} took {process_time:.2f}ms")


def _require_store(request: Request) -> ResultStore:
    store = request.app.state.store
    if store is None:
        raise HTTPException(status_code=503, detail="Result storage not available")
    return store


async def _persist(request: Request, result) -> Optional[str]:
    """Persist a result; on failure keep it pending and return the error."""
    state = request.app.state
    store = state.store
    if store is None:
        outcome_error = "Result storage not available"
    else:
        outcome = await run_in_threadpool(store.append, result)
        if outcome.success:
            state.pending.pop(result.id, None)
            return None
        outcome_error = outcome.error

    # Re-inserting moves a retried result to the newest end
    state.pending.pop(result.id, None)
    state.pending[result.id] = result
    logger.warning(f"Interview {result.id} kept pending for retry: {outcome_error}")

    while len(state.pending) > state.max_pending:
        evicted_id = next(iter(state.pending))
        del state.pending[evicted_id]
        logger.error(f"Pending results over limit ({state.max_pending}); dropped unpersisted interview {evicted_id}")
    return outcome_error


@router.get("/questions", dependencies=[Depends(log_request_time)])
@limiter.limit(RATE_LIMIT)
async def get_questions(
    request: Request,
    theory_count: Optional[int] = Query(None, alias="theoryCount", ge=0),
    coding_count: Optional[int] = Query(None, alias="codingCount", ge=0),
    seed: Optional[int] = Query(None),
):
    """
    Get a structured question set (Part A theory + Part B coding).

    Pass ``seed`` to get a reproducible selection.
    """
    interview_config = get_interview_config()
    if theory_count is None:
        theory_count = interview_config.get("theory_count", 10)
    if coding_count is None:
        coding_count = interview_config.get("coding_count", 10)

    rng = random.Random(seed) if seed is not None else random.Random()
    selection = request.app.state.catalog.select_questions(theory_count, coding_count, rng=rng)

    logger.info(
        f"Serving question set: {len(selection['partA'])} theory, "
        f"{len(selection['partB'])} coding ({selection['totalQuestions']} total)"
    )
    return {"success": True, **selection}


@router.post("/interview/submit", dependencies=[Depends(log_request_time)])
@limiter.limit(RATE_LIMIT)
async def submit_interview(request: Request, payload: Dict[str, Any] = Body(...)):
    """
    Score a finished interview and persist the result.

    If the result cannot be persisted the response is a 503 carrying the
    computed result; the result is kept and can be retried through
    ``POST /interview/{interview_id}/persist``.
    """
    try:
        submission = SessionSubmission.from_payload(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid submission: {e}")

    result = request.app.state.assembler.assemble(submission)
    response = to_submit_response(result)

    error = await _persist(request, result)
    if error is not None:
        return JSONResponse(
            status_code=503,
            content={"error": ERROR_SAVE_FAILED, "detail": error, "persisted": False, **response},
        )
    return {"persisted": True, **response}


@router.post("/interview/{interview_id}/persist", dependencies=[Depends(log_request_time)])
@limiter.limit(RATE_LIMIT)
async def retry_persist(request: Request, interview_id: str):
    """Retry persisting a result whose first save failed."""
    result = request.app.state.pending.get(interview_id)
    if result is None:
        raise HTTPException(status_code=404, detail=ERROR_NOT_PENDING)

    error = await _persist(request, result)
    if error is not None:
        raise HTTPException(status_code=503, detail=f"{ERROR_SAVE_FAILED}: {error}")
    return {"persisted": True, "interviewId": interview_id}


@router.get("/admin/interviews", dependencies=[Depends(log_request_time)])
@limiter.limit(RATE_LIMIT)
async def list_interviews(request: Request):
    """Summary rows for every stored interview."""
    store = _require_store(request)
    try:
        records = await run_in_threadpool(store.list_all)
    except PersistenceError as e:
        logger.error(f"Error loading interviews: {e}")
        raise HTTPException(status_code=500, detail=ERROR_LOAD_FAILED)
    return [to_admin_summary(record) for record in records]


@router.get("/admin/interviews/{interview_id}", dependencies=[Depends(log_request_time)])
@limiter.limit(RATE_LIMIT)
async def get_interview(request: Request, interview_id: str):
    """Full stored record of one interview."""
    store = _require_store(request)
    try:
        record = await run_in_threadpool(store.get_by_id, interview_id)
    except PersistenceError as e:
        logger.error(f"Error loading interview {interview_id}: {e}")
        raise HTTPException(status_code=500, detail=ERROR_LOAD_FAILED)
    if record is None:
        raise HTTPException(status_code=404, detail=ERROR_INTERVIEW_NOT_FOUND)
    return record


@router.get("/admin/stats", dependencies=[Depends(log_request_time)])
@limiter.limit(RATE_LIMIT)
async def get_statistics(request: Request):
    store = _require_store(request)
    try:
        records = await run_in_threadpool(store.list_all)
    except PersistenceError as e:
        logger.error(f"Error loading statistics: {e}")
        raise HTTPException(status_code=500, detail="Failed to load statistics")
    return compute_statistics(records, request.app.state.catalog)


@router.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint.

    Reports the question pool structure and whether result storage is available.
    """
    catalog = request.app.state.catalog
    store = request.app.state.store
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__,
        "storage": store.backend if store is not None else "unavailable",
        "pendingResults": len(request.app.state.pending),
        "totalQuestions": len(catalog),
        "questionStructure": {
            part.label: {
                "count": len(catalog.by_part(part)),
                "description": PART_DESCRIPTIONS[part],
                "topics": PART_TOPICS[part],
            }
            for part in Part
        },
    }


def create_app(
    catalog: Optional[RubricCatalog] = None,
    store: Optional[ResultStore] = None,
    assembler: Optional[SessionAssembler] = None,
    max_pending: Optional[int] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Components that are not passed in are created from configuration when
    the app starts. ``max_pending`` bounds how many unpersisted results are
    kept for retry; the oldest are dropped first.
    """
    app_instance = FastAPI(
        title="Interview Grader API",
        description="Scoring and integrity engine for timed Java technical interviews.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    if catalog is not None:
        app_instance.state.catalog = catalog
    if store is not None:
        app_instance.state.store = store
    if assembler is not None:
        app_instance.state.assembler = assembler
    app_instance.state.max_pending = max_pending if max_pending is not None else MAX_PENDING_RESULTS

    # Add rate limiter exception handler
    app_instance.state.limiter = limiter
    app_instance.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Add CORS middleware to allow cross-origin requests
    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=server_config.get("cors_origins", ["*"]),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handler for general exceptions
    @app_instance.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "An internal server error occurred. Please try again later."}
        )

    app_instance.include_router(router)
    return app_instance


app = create_app()


def start_server(host: Optional[str] = None, port: Optional[int] = None):
    """
    Start the FastAPI server.

    Args:
        host: Host to bind the server to
        port: Port to bind the server to
    """
    import uvicorn

    # Configure Uvicorn logging
    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["access"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

    uvicorn.run(
        app,
        host=host or server_config.get("host", "0.0.0.0"),
        port=port or server_config.get("port", 3000),
        log_config=log_config
    )


if __name__ == "__main__":
    start_server()
