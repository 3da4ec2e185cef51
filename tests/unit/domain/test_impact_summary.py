"""Unit tests for impact area aggregation."""

from datetime import datetime
from uuid import uuid4

from domain.entities.impact_summary import summarize_impact
from domain.entities.todo import CANONICAL_IMPACT_AREAS, ImpactArea, Todo, TodoStatus

USER_ID = uuid4()
BUSINESS_ID = uuid4()


def _todo(impact: ImpactArea, status: TodoStatus = TodoStatus.TODO, deleted: bool = False) -> Todo:
    return Todo(
        user_id=USER_ID,
        business_id=BUSINESS_ID,
        title=f"{impact} task",
        impact=impact,
        status=status,
        deleted_at=datetime(2026, 1, 1) if deleted else None,
    )


class TestSummarizeImpact:
    def test_empty_set_reports_every_area(self) -> None:
        summaries = summarize_impact([])

        assert [s.impact for s in summaries] == list(CANONICAL_IMPACT_AREAS)
        assert all((s.total, s.done, s.pct) == (0, 0, 0) for s in summaries)

    def test_counts_and_percentages(self) -> None:
        todos = [
            _todo(ImpactArea.GOVERNANCE, TodoStatus.DONE),
            _todo(ImpactArea.GOVERNANCE, TodoStatus.DONE),
            _todo(ImpactArea.GOVERNANCE),
            _todo(ImpactArea.WORKERS, TodoStatus.IN_PROGRESS),
            _todo(ImpactArea.CUSTOMERS, TodoStatus.DONE),
        ]

        by_area = {s.impact: s for s in summarize_impact(todos)}

        assert (by_area[ImpactArea.GOVERNANCE].total, by_area[ImpactArea.GOVERNANCE].done) == (3, 2)
        assert by_area[ImpactArea.GOVERNANCE].pct == 67
        assert by_area[ImpactArea.WORKERS].pct == 0
        assert by_area[ImpactArea.CUSTOMERS].pct == 100

    def test_half_rounds_up(self) -> None:
        todos = [_todo(ImpactArea.COMMUNITY, TodoStatus.DONE)] + [
            _todo(ImpactArea.COMMUNITY) for _ in range(7)
        ]

        community = next(s for s in summarize_impact(todos) if s.impact == ImpactArea.COMMUNITY)

        # 1/8 = 12.5%
        assert community.pct == 13

    def test_ignores_deleted_and_other(self) -> None:
        todos = [
            _todo(ImpactArea.ENVIRONMENT, TodoStatus.DONE, deleted=True),
            _todo(ImpactArea.OTHER, TodoStatus.DONE),
            _todo(ImpactArea.ENVIRONMENT),
        ]

        summaries = summarize_impact(todos)
        environment = next(s for s in summaries if s.impact == ImpactArea.ENVIRONMENT)

        assert (environment.total, environment.done) == (1, 0)
        assert ImpactArea.OTHER not in {s.impact for s in summaries}
        assert sum(s.total for s in summaries) == 1
