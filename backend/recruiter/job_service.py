"""
Batch CV ranking and the other model-backed workflows.

A batch runs every uploaded file through extract → prompt → model → parse
and collects the survivors into the store, sorted by overall score. A file
that cannot be read or ranked is logged and skipped; it never fails the
whole batch.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from .config import CV_EXCERPT_CHARS, RANK_CONCURRENCY
from .errors import InvalidAIResponseError, LLMServiceError, PreconditionError
from .llm_service import rank_candidate, recalibrate, suggest_categories
from .models import Candidate, Recalibration, Role
from .resume_parser import extract_text, has_enough_text
from .store import RecruitingStore, new_candidate_id
from .utils import timing_decorator, log_performance_metrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    """An upload held fully in memory."""

    filename: str
    content_type: str
    data: bytes


def create_role(
    store: RecruitingStore, title: str, description: str, required_skills: str = "",
) -> Role:
    """Generate evaluation categories for a role and make it the active one."""
    logger.info("Generating categories for role: %s", title)
    categories = suggest_categories(title, description, required_skills)
    return store.save_role(title, description, required_skills, categories)


def _rank_file(
    store: RecruitingStore, role: Role, index: int, total: int, upload: UploadedFile,
) -> Optional[Candidate]:
    """Rank one upload; return None when it has to be skipped."""
    file_start = time.time()
    store.advance_progress(index + 1, upload.filename)
    logger.info("Processing file %d/%d: %s", index + 1, total, upload.filename)

    text = extract_text(upload.data, upload.content_type, upload.filename)
    logger.info("Text extracted: %d characters", len(text))

    if not has_enough_text(text):
        logger.warning("Skipping %s: insufficient text (%d chars)", upload.filename, len(text))
        return None

    try:
        ranking = rank_candidate(role, text)
    except (LLMServiceError, InvalidAIResponseError) as e:
        logger.error("Error ranking %s: %s", upload.filename, e)
        log_performance_metrics(f"File {index + 1} processing", time.time() - file_start, False)
        return None

    log_performance_metrics(f"File {index + 1} processing", time.time() - file_start)
    return Candidate(
        id=new_candidate_id(index),
        filename=upload.filename,
        cv_text=text[:CV_EXCERPT_CHARS],
        ranking=ranking,
    )


@timing_decorator
def process_batch(store: RecruitingStore, files: list[UploadedFile]) -> list[Candidate]:
    """
    Rank every uploaded CV against the active role.

    Files are ranked by a pool of ``RANK_CONCURRENCY`` workers; results are
    collected in upload order and then sorted by overall score, highest
    first. Returns the ranked candidates.
    """
    store.require_role()
    if not files:
        raise PreconditionError("No files uploaded")

    logger.info("Processing %d files...", len(files))
    role = store.start_batch(len(files))

    try:
        total = len(files)
        with ThreadPoolExecutor(max_workers=RANK_CONCURRENCY) as pool:
            results = list(pool.map(
                lambda item: _rank_file(store, role, item[0], total, item[1]),
                enumerate(files),
            ))

        for candidate in results:
            if candidate is not None:
                store.add_candidate(candidate)

        ranked = store.finish_batch()
    except Exception:
        logger.exception("Error processing CVs")
        store.fail_batch()
        raise

    logger.info("Processing complete! %d candidates ranked.", len(ranked))
    return ranked


def recalibrate_candidate(store: RecruitingStore, candidate_id: str, notes: str) -> Recalibration:
    """Store interview notes and replace the candidate's recalibration.

    Notes are kept even when the model call fails. The original ranking and
    the candidate's place in the list are never touched. Notes are refused
    while a batch is running; if a batch starts during the model call, the
    result lands on the candidate the notes were written to, which that
    batch has already dropped from the list.
    """
    candidate = store.set_notes(candidate_id, notes)
    recalibration = recalibrate(candidate.ranking, notes)
    store.set_recalibration(candidate, recalibration)
    logger.info(
        "Recalibrated %s: %s -> %s",
        candidate_id, candidate.overall_score, recalibration.recalibrated_score,
    )
    return recalibration
