"""Per-impact-area progress, derived from the active todo set."""

from collections.abc import Iterable
from dataclasses import dataclass

from domain.entities.todo import CANONICAL_IMPACT_AREAS, ImpactArea, Todo


@dataclass(frozen=True, slots=True)
class ImpactSummary:
    """Read-only value object: completion figures for one impact area."""

    impact: ImpactArea
    total: int
    done: int
    pct: int


def _percentage(done: int, total: int) -> int:
    if total == 0:
        return 0
    # Half-up rounding; Python's round() would send 50.5 to 50.
    return int(done * 100 / total + 0.5)


def summarize_impact(todos: Iterable[Todo]) -> list[ImpactSummary]:
    """Build one summary per canonical impact area, in canonical order.

    Deleted todos and the ``Other`` bucket are ignored. Areas without todos
    are still reported, with zeroes.
    """
    totals = {impact: 0 for impact in CANONICAL_IMPACT_AREAS}
    done = {impact: 0 for impact in CANONICAL_IMPACT_AREAS}

    for todo in todos:
        if todo.is_deleted or todo.impact not in totals:
            continue
        totals[todo.impact] += 1
        if todo.is_done:
            done[todo.impact] += 1

    return [
        ImpactSummary(
            impact=impact,
            total=totals[impact],
            done=done[impact],
            pct=_percentage(done[impact], totals[impact]),
        )
        for impact in CANONICAL_IMPACT_AREAS
    ]
