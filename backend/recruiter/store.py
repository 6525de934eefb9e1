"""
In-memory session store and FastAPI dependency.

One store is created per application (see the lifespan hook in
``main``) and holds the single active role, the ranked candidate list and
the batch progress record. Nothing survives a restart.
"""

import threading
import time
from typing import Optional

from fastapi import Request

from .errors import ConflictError, NotFoundError, PreconditionError
from .models import (
    Candidate, CategorySet, MainCategory, ProcessingProgress, Recalibration, Role, SubCategory,
)

CONFIRMED_GUIDANCE = "Categories confirmed by HR team"


def _millis() -> int:
    return int(time.time() * 1000)


class RecruitingStore:
    """Process-local state shared by the request handlers."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._role: Optional[Role] = None
        self._candidates: list[Candidate] = []
        self._progress = ProcessingProgress()
        self._batch_running = False

    # ── Role ────────────────────────────────────────────────────────────────

    def save_role(
        self, title: str, description: str, required_skills: str, categories: CategorySet,
    ) -> Role:
        """Replace the active role; there is never more than one."""
        role = Role(
            id=f"role_{_millis()}",
            title=title,
            description=description,
            required_skills=required_skills,
            categories=categories,
        )
        with self._lock:
            self._role = role
        return role

    def confirm_role(
        self, main_categories: list[MainCategory], sub_categories: list[SubCategory],
    ) -> Role:
        with self._lock:
            role = self.require_role()
            role.categories = CategorySet(
                main_categories=main_categories,
                sub_categories=sub_categories,
                evaluation_guidance=CONFIRMED_GUIDANCE,
            )
            return role

    @property
    def role(self) -> Optional[Role]:
        return self._role

    def require_role(self) -> Role:
        if self._role is None:
            raise PreconditionError("No role created yet")
        return self._role

    # ── Batch lifecycle ─────────────────────────────────────────────────────

    def start_batch(self, total: int) -> Role:
        """Claim the store for a batch and return a snapshot of the role to rank against."""
        with self._lock:
            if self._batch_running:
                raise ConflictError("A batch is already being processed")
            role = self.require_role().model_copy(deep=True)
            self._batch_running = True
            self._progress = ProcessingProgress(total=total, status="processing")
            self._candidates = []
            return role

    def advance_progress(self, current: int, filename: str) -> None:
        with self._lock:
            self._progress.current = max(self._progress.current, current)
            self._progress.current_name = filename

    def add_candidate(self, candidate: Candidate) -> None:
        with self._lock:
            self._candidates.append(candidate)

    def finish_batch(self) -> list[Candidate]:
        """Sort by overall score, highest first, and mark the batch complete."""
        with self._lock:
            self._candidates.sort(key=lambda c: c.overall_score, reverse=True)
            self._progress.status = "complete"
            self._batch_running = False
            return list(self._candidates)

    def fail_batch(self) -> None:
        with self._lock:
            self._progress.status = "error"
            self._batch_running = False

    def progress_snapshot(self) -> ProcessingProgress:
        with self._lock:
            return self._progress.model_copy()

    # ── Candidates ──────────────────────────────────────────────────────────

    def list_candidates(self) -> list[Candidate]:
        with self._lock:
            return list(self._candidates)

    def get_candidate(self, candidate_id: str) -> Candidate:
        with self._lock:
            for candidate in self._candidates:
                if candidate.id == candidate_id:
                    return candidate
        raise NotFoundError("Candidate not found")

    def mark_reviewed(self, candidate_id: str) -> Candidate:
        with self._lock:
            candidate = self.get_candidate(candidate_id)
            candidate.reviewed = True
            return candidate

    def set_notes(self, candidate_id: str, notes: str) -> Candidate:
        with self._lock:
            if self._batch_running:
                raise ConflictError("A batch is being processed, try again when it completes")
            candidate = self.get_candidate(candidate_id)
            candidate.interview_notes = notes
            return candidate

    def set_recalibration(self, candidate: Candidate, recalibration: Recalibration) -> Candidate:
        with self._lock:
            candidate.recalibration = recalibration
            return candidate

    def reset(self) -> None:
        with self._lock:
            self._role = None
            self._candidates = []
            self._progress = ProcessingProgress()
            self._batch_running = False


def new_candidate_id(index: int) -> str:
    return f"cand_{_millis()}_{index}"


def get_store(request: Request) -> RecruitingStore:
    """FastAPI dependency returning the application's store."""
    return request.app.state.store
