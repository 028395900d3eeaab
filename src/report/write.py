"""JSON lines output for resolution results."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import orjson

from resolve.session import (
    ManyImplementations,
    NoImplementations,
    NoReferences,
    SingleImplementation,
)

if TYPE_CHECKING:
    from resolve.session import Outcome


def _to_dict(obj: object) -> object:
    """Convert object to dict for JSON serialization."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    return obj


def write_jsonl_record(stream: IO[str], record: object) -> None:
    payload = orjson.dumps(_to_dict(record), option=orjson.OPT_SORT_KEYS)
    stream.write(payload.decode("utf-8") + "\n")
    stream.flush()


def outcome_record(outcome: Outcome) -> dict[str, object]:
    """Summarise an outcome as a JSON-ready mapping."""
    if isinstance(outcome, NoReferences):
        return {"outcome": "no_references", "matches": []}
    if isinstance(outcome, NoImplementations):
        return {"outcome": "no_implementations", "matches": []}
    if isinstance(outcome, SingleImplementation):
        return {"outcome": "single", "matches": [outcome.match.model_dump()]}
    if isinstance(outcome, ManyImplementations):
        return {
            "outcome": "many",
            "matches": [match.model_dump() for match in outcome.matches],
        }
    raise AssertionError(outcome)


__all__ = ["outcome_record", "write_jsonl_record"]
