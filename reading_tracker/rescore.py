"""Batch re-scoring of stored reading sessions.

Sessions are exchanged as JSON lines, one session object per line, with
at least ``url`` and ``title`` and the extracted text in ``content`` (or
``excerpt`` when the full text was not kept).
"""

import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import orjson

from .analysis.analyzer import MANUAL_QUEUE_CATEGORY, ContentAnalyzer
from .logging import get_logger, log_processing_stage

logger = get_logger(__name__)


class SessionFormatError(ValueError):
    """Raised when a sessions file contains a malformed line."""

    def __init__(self, path: Path, line_number: int, message: str):
        self.path = path
        self.line_number = line_number
        super().__init__(f"{path}:{line_number}: {message}")


def load_sessions(path: Path) -> list[dict[str, Any]]:
    """Read sessions from a JSON-lines file, skipping blank lines."""
    sessions = []
    with open(path, "rb") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                record = orjson.loads(line)
            except orjson.JSONDecodeError as e:
                raise SessionFormatError(path, line_number, f"invalid JSON: {e}") from e
            if not isinstance(record, dict):
                raise SessionFormatError(path, line_number, "expected a JSON object")
            sessions.append(record)
    return sessions


def write_sessions(sessions: Iterable[dict[str, Any]], path: Path) -> None:
    """Write sessions as JSON lines."""
    with open(path, "wb") as f:
        for session in sessions:
            f.write(orjson.dumps(session))
            f.write(b"\n")


def needs_rescore(session: dict[str, Any], rescore_all: bool = False) -> bool:
    """Check if session should be re-analyzed.

    Manually queued sessions never are. Others are unless they already
    carry a nonzero score and rescore_all is off.
    """
    if session.get("category") == MANUAL_QUEUE_CATEGORY:
        return False
    return rescore_all or not session.get("learning_score")


def rescore_session(
    session: dict[str, Any],
    analyzer: ContentAnalyzer,
    rescore_all: bool = False,
) -> dict[str, Any]:
    """Return a copy of session with a fresh score and category.

    Sessions that already have a score are copied unchanged unless
    rescore_all is set.
    """
    updated = dict(session)
    if not needs_rescore(session, rescore_all):
        return updated

    content = session.get("content") or session.get("excerpt") or ""
    result = analyzer.analyze(session.get("url") or "", session.get("title") or "", content)

    updated["learning_score"] = result.learning_score
    updated["category"] = result.category
    updated["should_track"] = result.should_track
    updated["reason"] = result.reason
    return updated


def rescore_sessions(
    sessions: Iterable[dict[str, Any]],
    analyzer: ContentAnalyzer,
    rescore_all: bool = False,
) -> list[dict[str, Any]]:
    """Re-run the analyzer over sessions missing a score, or all of them."""
    start = time.perf_counter()
    sessions = list(sessions)
    rescored = [rescore_session(session, analyzer, rescore_all) for session in sessions]

    logger.info(
        "sessions_rescored",
        **log_processing_stage(
            "rescore",
            input_count=len(sessions),
            output_count=sum(1 for s in sessions if needs_rescore(s, rescore_all)),
            duration=time.perf_counter() - start,
        ),
    )
    return rescored
