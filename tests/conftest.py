import pytest

from exam_planner.models import Topic, SchedulingOptions


@pytest.fixture
def make_topic():
    """Factory for Topic records with sensible defaults."""
    def _make(id="c01", subject="commercial", code=None, title="Ledger basics",
              display_order=0, estimated_minutes=100, problem_page_start=None):
        return Topic(
            id=id,
            subject=subject,
            code=code if code is not None else id[-2:],
            title=title,
            display_order=display_order,
            estimated_minutes=estimated_minutes,
            problem_page_start=problem_page_start,
        )
    return _make


@pytest.fixture
def short_options():
    """2025-01-01 (Wed) to exam 2025-01-10, Sundays off: 8 study days."""
    return SchedulingOptions(
        start_date="2025-01-01", exam_date="2025-01-10", daily_minutes=60, rest_days_per_week=1,
    )
