import pytest

from exam_planner.agenda import (
    TaskUpdateError, date_summary, group_by_date, group_by_subject, mark_status, minutes_by_task_type,
    record_actual, rows_in_window, tasks_for_date, topic_progress,
)


def _row(task_date, title, subject="commercial", minutes=30, status="todo", task_type="learn", topic_id=None):
    return {
        "task_date": task_date, "title": title, "subject": subject, "planned_minutes": minutes,
        "status": status, "task_type": task_type, "topic_id": topic_id, "meta": {},
    }


ROWS = [
    _row("2025-01-02", "Drill B", status="done", task_type="drill", topic_id="c01"),
    _row("2025-01-01", "Learn A", topic_id="c01"),
    _row("2025-01-01", "Daily review", subject="mixed", minutes=15, task_type="review"),
    _row("2025-01-02", "Cost basics", subject="industrial", minutes=45, topic_id="i01"),
    _row("2025-01-02", "Alpha", status="done", topic_id="c02"),
]


def test_group_by_date_sorted():
    grouped = group_by_date(ROWS)
    assert list(grouped) == ["2025-01-01", "2025-01-02"]
    assert [r["title"] for r in grouped["2025-01-01"]] == ["Learn A", "Daily review"]


def test_date_summary():
    assert date_summary(tasks_for_date(ROWS, "2025-01-02")) == {"done": 2, "total": 3, "minutes": 105}
    assert date_summary([]) == {"done": 0, "total": 0, "minutes": 0}


def test_tasks_for_date_unknown_day():
    assert tasks_for_date(ROWS, "2025-03-01") == []


def test_group_by_subject_order():
    groups = group_by_subject(ROWS)
    assert [subject for subject, _ in groups] == ["mixed", "commercial", "industrial"]
    commercial = dict(groups)["commercial"]
    # open tasks first, then alphabetical
    assert [r["title"] for r in commercial] == ["Learn A", "Alpha", "Drill B"]


def test_group_by_subject_skips_empty():
    groups = group_by_subject([_row("2025-01-01", "Only", subject="industrial")])
    assert [subject for subject, _ in groups] == ["industrial"]


def test_topic_progress(make_topic):
    topics = [make_topic(id="c01"), make_topic(id="c02"), make_topic(id="c03")]
    progress = {p["topic_id"]: p for p in topic_progress(topics, ROWS)}
    assert (progress["c01"]["done"], progress["c01"]["total"], progress["c01"]["ratio"]) == (1, 2, 50)
    assert progress["c02"]["ratio"] == 100
    assert (progress["c03"]["total"], progress["c03"]["ratio"]) == (0, 0)


def test_minutes_by_task_type():
    assert minutes_by_task_type(ROWS) == {"learn": 105, "drill": 30, "review": 15}


def _fresh_rows():
    return [dict(r) for r in ROWS]


def test_mark_status_updates_progress(make_topic):
    rows = _fresh_rows()
    topics = [make_topic(id="c01")]
    assert topic_progress(topics, rows)[0]["ratio"] == 50
    assert date_summary(tasks_for_date(rows, "2025-01-01"))["done"] == 0

    mark_status(rows, 1, "done")
    assert topic_progress(topics, rows)[0]["ratio"] == 100
    assert date_summary(tasks_for_date(rows, "2025-01-01"))["done"] == 1


def test_mark_status_back_to_todo():
    rows = _fresh_rows()
    row = mark_status(rows, 0, "todo")
    assert row is rows[0]
    assert date_summary(tasks_for_date(rows, "2025-01-02"))["done"] == 1


def test_mark_status_rejects_bad_input():
    rows = _fresh_rows()
    with pytest.raises(TaskUpdateError):
        mark_status(rows, 0, "finished")
    with pytest.raises(TaskUpdateError):
        mark_status(rows, len(rows), "done")
    with pytest.raises(TaskUpdateError):
        mark_status(rows, -1, "done")


def test_record_actual():
    rows = _fresh_rows()
    record_actual(rows, 1, 40, "  slower than planned ")
    assert rows[1]["actual_minutes"] == 40
    assert rows[1]["note"] == "slower than planned"
    record_actual(rows, 1, None, "   ")
    assert rows[1]["actual_minutes"] is None
    assert rows[1]["note"] is None


def test_record_actual_rejects_negative():
    with pytest.raises(TaskUpdateError):
        record_actual(_fresh_rows(), 0, -5)


def test_rows_in_window():
    rows = rows_in_window(ROWS, "2025-01-02", "2025-01-31")
    assert {r["task_date"] for r in rows} == {"2025-01-02"}
    assert rows_in_window(ROWS, "2025-02-01", "2025-02-28") == []
