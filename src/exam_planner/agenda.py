"""Grouping and progress views over stored task rows."""
from exam_planner.models import COMMERCIAL, INDUSTRIAL, MIXED, Topic

SUBJECT_ORDER = (MIXED, COMMERCIAL, INDUSTRIAL)


def group_by_date(rows: list[dict]) -> dict[str, list[dict]]:
    """Rows keyed by task_date, dates in ascending order."""
    grouped: dict[str, list[dict]] = {}
    for row in rows:
        grouped.setdefault(row["task_date"], []).append(row)
    return {d: grouped[d] for d in sorted(grouped)}


def date_summary(rows: list[dict]) -> dict:
    return {
        "done": sum(1 for r in rows if r.get("status") == "done"),
        "total": len(rows),
        "minutes": sum(r["planned_minutes"] for r in rows),
    }


def tasks_for_date(rows: list[dict], day: str) -> list[dict]:
    return [r for r in rows if r["task_date"] == day]


def group_by_subject(rows: list[dict]) -> list[tuple[str, list[dict]]]:
    """Mixed first, then each track; open tasks ahead of finished ones."""
    groups = []
    for subject in SUBJECT_ORDER:
        subject_rows = [r for r in rows if r["subject"] == subject]
        if not subject_rows:
            continue
        subject_rows.sort(key=lambda r: (r.get("status") == "done", r["title"]))
        groups.append((subject, subject_rows))
    return groups


def topic_progress(topics: list[Topic], rows: list[dict]) -> list[dict]:
    counts = {}
    for row in rows:
        topic_id = row.get("topic_id")
        if not topic_id:
            continue
        entry = counts.setdefault(topic_id, {"done": 0, "total": 0})
        entry["total"] += 1
        if row.get("status") == "done":
            entry["done"] += 1

    results = []
    for topic in topics:
        entry = counts.get(topic.id, {"done": 0, "total": 0})
        ratio = round(entry["done"] / entry["total"] * 100) if entry["total"] else 0
        results.append({
            "topic_id": topic.id,
            "subject": topic.subject,
            "code": topic.code,
            "title": topic.title,
            "problem_page_start": topic.problem_page_start,
            "done": entry["done"],
            "total": entry["total"],
            "ratio": ratio,
        })
    return results


def minutes_by_task_type(rows: list[dict]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for row in rows:
        totals[row["task_type"]] = totals.get(row["task_type"], 0) + row["planned_minutes"]
    return totals


TASK_STATUSES = ("todo", "done", "skipped")


class TaskUpdateError(ValueError):
    """Raised when a task update names an unknown task or an invalid value."""


def _row_at(rows: list[dict], index: int) -> dict:
    if not 0 <= index < len(rows):
        raise TaskUpdateError(f"No task #{index}")
    return rows[index]


def mark_status(rows: list[dict], index: int, status: str) -> dict:
    """Set the status of rows[index] in place and return the row."""
    if status not in TASK_STATUSES:
        raise TaskUpdateError(f"Status must be one of {', '.join(TASK_STATUSES)}")
    row = _row_at(rows, index)
    row["status"] = status
    return row


def record_actual(rows: list[dict], index: int, minutes: int | None, note: str | None = None) -> dict:
    """Store actual minutes spent and a note; blanks clear them."""
    if minutes is not None and minutes < 0:
        raise TaskUpdateError("Actual minutes can't be negative")
    row = _row_at(rows, index)
    note = (note or "").strip()
    row["actual_minutes"] = minutes
    row["note"] = note or None
    return row


def rows_in_window(rows: list[dict], start: str, end: str) -> list[dict]:
    """Rows dated start..end inclusive (YYYY-MM-DD strings compare in date order)."""
    return [r for r in rows if start <= r["task_date"] <= end]
