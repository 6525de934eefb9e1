"""
FastAPI application entry point.

All state lives in a ``RecruitingStore`` created by the lifespan hook and
handed to the routes through the ``get_store`` dependency.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import CORS_ORIGINS, HOST, LOG_LEVEL, MAX_UPLOAD_BYTES, MAX_UPLOAD_FILES, PORT
from .errors import PreconditionError, RecruitingError
from .exporter import check_format, to_csv, to_json
from .job_service import UploadedFile, create_role, process_batch, recalibrate_candidate
from .models import ConfirmRoleRequest, NotesRequest, SaveRoleRequest
from .store import RecruitingStore, get_store


# ── Logging ─────────────────────────────────────────────────────────────────
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown hook."""
    app.state.store = RecruitingStore()
    logger.info("Recruiting store ready.")
    yield
    logger.info("Shutting down.")


app = FastAPI(
    title="HR Recruiting Assistant API",
    version="1.0.0",
    lifespan=lifespan,
)


# ── Error handlers ──────────────────────────────────────────────────────────
@app.exception_handler(RecruitingError)
async def recruiting_error(request: Request, exc: RecruitingError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    """Answer malformed bodies with 400 and the usual error envelope."""
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"][1:]) or "body"
        messages.append(f"{field}: {err['msg']}")
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


@app.exception_handler(Exception)
async def catch_all(request, exc):
    logger.exception("Unhandled exception")
    return JSONResponse(
        status_code=500,
        content={"error": "internal server error", "detail": str(exc)},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# ── Routes ──────────────────────────────────────────────────────────────────

@app.get("/")
def health_check():
    return {"message": "HR Recruiting Assistant API", "status": "running"}


@app.post("/api/save-role")
def save_role(body: SaveRoleRequest, store: RecruitingStore = Depends(get_store)):
    role = create_role(store, body.title, body.description, body.required_skills)
    return {
        "success": True,
        "role": role.to_api(),
        "suggestions": role.categories.to_api(),
    }


@app.post("/api/confirm-role")
def confirm_role(body: ConfirmRoleRequest, store: RecruitingStore = Depends(get_store)):
    role = store.confirm_role(body.main_categories, body.sub_categories)
    return {"success": True, "role": role.to_api()}


def _read_uploads(files: list[UploadFile]) -> list[UploadedFile]:
    if len(files) > MAX_UPLOAD_FILES:
        raise PreconditionError(f"Maximum {MAX_UPLOAD_FILES} files allowed per batch")

    uploads: list[UploadedFile] = []
    total_bytes = 0
    for f in files:
        data = f.file.read()
        total_bytes += len(data)
        if total_bytes > MAX_UPLOAD_BYTES:
            raise PreconditionError("Upload too large")
        uploads.append(UploadedFile(
            filename=f.filename or "unnamed",
            content_type=f.content_type or "",
            data=data,
        ))
    return uploads


@app.post("/api/process-cvs")
def process_cvs(
    files: Optional[list[UploadFile]] = File(None),
    store: RecruitingStore = Depends(get_store),
):
    logger.info("CV upload received: %d files", len(files or []))
    store.require_role()
    ranked = process_batch(store, _read_uploads(files or []))
    return {
        "success": True,
        "candidatesCount": len(ranked),
        "candidates": [c.summary_row() for c in ranked],
    }


@app.get("/api/progress")
def progress(store: RecruitingStore = Depends(get_store)):
    return store.progress_snapshot().to_api()


@app.get("/api/candidates")
def list_candidates(store: RecruitingStore = Depends(get_store)):
    candidates = [c.list_row() for c in store.list_candidates()]
    return {"success": True, "candidates": candidates, "total": len(candidates)}


@app.get("/api/candidate/{candidate_id}")
def candidate_detail(candidate_id: str, store: RecruitingStore = Depends(get_store)):
    return {"success": True, "candidate": store.get_candidate(candidate_id).detail()}


@app.post("/api/candidate/{candidate_id}/review")
def mark_reviewed(candidate_id: str, store: RecruitingStore = Depends(get_store)):
    store.mark_reviewed(candidate_id)
    return {"success": True}


@app.post("/api/candidate/{candidate_id}/notes")
def submit_notes(
    candidate_id: str, body: NotesRequest, store: RecruitingStore = Depends(get_store),
):
    recalibration = recalibrate_candidate(store, candidate_id, body.notes)
    return {"success": True, "recalibration": recalibration.to_api()}


@app.get("/api/export/{fmt}")
def export(fmt: str, store: RecruitingStore = Depends(get_store)):
    check_format(fmt)
    candidates = store.list_candidates()

    if fmt == "csv":
        return Response(
            content=to_csv(candidates),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=candidates-ranking.csv"},
        )

    return JSONResponse(
        content=to_json(store.role, candidates),
        headers={"Content-Disposition": "attachment; filename=candidates-ranking.json"},
    )


def run() -> None:
    import uvicorn

    logger.info("HR recruiting assistant listening on http://%s:%d", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
