from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True, slots=True)
class Change:
    kind: str
    target: str
    old: str | None = None
    new: str | None = None
    count: int = 1
    description: str = ""


@dataclass(slots=True)
class RewriteResponse:
    content: str
    changes: list[Change] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def summarize_changes(changes: Iterable[Change]) -> dict[str, int]:
    summary: dict[str, int] = {}
    for change in changes:
        summary[change.kind] = summary.get(change.kind, 0) + change.count
    return summary


__all__ = ["Change", "RewriteResponse", "summarize_changes"]
