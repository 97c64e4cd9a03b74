"""Plan creation: validate form input, run the scheduler, build task rows."""
import logging
import math

from exam_planner.models import SchedulingOptions, Topic, TaskSeed
from exam_planner.scheduler import ConfigurationError, StudyPlanScheduler

logger = logging.getLogger(__name__)

INSERT_CHUNK_SIZE = 500


class PlanInputError(ValueError):
    """Raised with a user-facing message when plan settings are rejected."""


def _as_number(value) -> float | None:
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return None


def parse_plan_form(form: dict) -> SchedulingOptions:
    """Validate raw plan settings (strings or numbers) into SchedulingOptions."""
    start_date = str(form.get("start_date") or "").strip()
    exam_date = str(form.get("exam_date") or "").strip()
    if not start_date or not exam_date:
        raise PlanInputError("Enter both a start date and an exam date.")

    daily_minutes = _as_number(form.get("daily_minutes", 0))
    # Whole minutes only; "0.5" would truncate to an empty budget
    if daily_minutes is None or not math.isfinite(daily_minutes) or int(daily_minutes) <= 0:
        raise PlanInputError("Enter a valid daily study time in minutes.")

    rest_days = _as_number(form.get("rest_days_per_week", 1))
    if rest_days is None or rest_days not in (0, 1, 2):
        raise PlanInputError("Rest days per week must be 0, 1 or 2.")

    return SchedulingOptions(
        start_date=start_date,
        exam_date=exam_date,
        daily_minutes=int(daily_minutes),
        rest_days_per_week=int(rest_days),
    )


def build_task_rows(seeds: list[TaskSeed], plan_id: str, user_id: str | None = None) -> list[dict]:
    """Seeds as storable rows, every task starting out as "todo"."""
    rows = []
    for seed in seeds:
        row = seed.to_dict()
        row.update({
            "plan_id": plan_id,
            "user_id": user_id,
            "status": "todo",
            "actual_minutes": None,
            "note": None,
        })
        rows.append(row)
    return rows


def create_plan(
    topics: list[Topic],
    form: dict,
    plan_id: str,
    user_id: str | None = None,
    scheduler: StudyPlanScheduler | None = None,
) -> list[dict]:
    options = parse_plan_form(form)
    scheduler = scheduler or StudyPlanScheduler()
    try:
        seeds = scheduler.generate(topics, options)
    except ConfigurationError as e:
        raise PlanInputError(str(e)) from e
    except ValueError as e:
        # Unparseable date strings
        raise PlanInputError(f"Dates must look like YYYY-MM-DD: {e}") from e
    logger.info("Plan %s: generated %d tasks for %d topics", plan_id, len(seeds), len(topics))
    return build_task_rows(seeds, plan_id, user_id)


def chunk_rows(rows: list[dict], size: int = INSERT_CHUNK_SIZE):
    """Yield successive slices of rows for batched inserts."""
    for i in range(0, len(rows), size):
        yield rows[i:i + size]
