"""
CSV / JSON export of the ranked candidate list.
"""

import csv
import io
from typing import Optional

from .errors import PreconditionError
from .models import Candidate, Role

CSV_HEADER = ["Filename", "Overall Score", "Reviewed", "Interview Notes"]
EXPORT_FORMATS = {"csv", "json"}


def _score(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


def to_csv(candidates: list[Candidate]) -> str:
    """One row per candidate; embedded quotes are doubled by the csv writer."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for c in candidates:
        writer.writerow([
            c.filename,
            _score(c.overall_score),
            "Yes" if c.reviewed else "No",
            c.interview_notes or "",
        ])
    return buf.getvalue()


def to_json(role: Optional[Role], candidates: list[Candidate]) -> dict:
    return {
        "role": role.to_api() if role else None,
        "candidates": [c.to_api() for c in candidates],
    }


def check_format(fmt: str) -> str:
    if fmt not in EXPORT_FORMATS:
        raise PreconditionError("Invalid format")
    return fmt
