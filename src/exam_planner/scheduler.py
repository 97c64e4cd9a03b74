"""Study-plan generation: turns a weighted curriculum into dated study tasks.

The pipeline is a chain of small pure stages:
calendar window -> taper sizing -> topic interleaving -> topic expansion
-> packing into days -> recurring review/mock tasks.
"""
import logging
import math
from dataclasses import dataclass, replace
from datetime import date

from exam_planner.dates import SUNDAY, WEDNESDAY, add_days, date_range, format_date, parse_date
from exam_planner.models import (
    COMMERCIAL, INDUSTRIAL, MIXED, SUBJECT_LABELS,
    LEARN, DRILL, REVIEW, MOCK, WEEKLY_REVIEW,
    SchedulingOptions, TaskSeed, Topic,
)

logger = logging.getLogger(__name__)

DAILY_REVIEW_MINUTES = 15
WEEKLY_REVIEW_MINUTES = 20
MOCK_EXAM_MINUTES = 90
MOCK_REVIEW_MINUTES = 60
FINAL_CHECK_MINUTES = 30
MIN_TOPIC_TASK_MINUTES = 30
LEARN_SHARE = 0.45


class ConfigurationError(ValueError):
    """Raised when the exam date leaves no room for a single study day."""


@dataclass
class CalendarWindow:
    all_dates: list[date]
    study_dates: list[str]
    sundays: list[str]


def is_rest_day(day: date, rest_days_per_week: int) -> bool:
    if rest_days_per_week <= 0:
        return False
    if day.weekday() == SUNDAY:
        return True
    return rest_days_per_week >= 2 and day.weekday() == WEDNESDAY


def build_calendar_window(options: SchedulingOptions) -> CalendarWindow:
    """Enumerate start date .. exam date - 1 and split out study days and Sundays."""
    start = parse_date(options.start_date)
    last_study = add_days(parse_date(options.exam_date), -1)
    if last_study < start:
        raise ConfigurationError(
            f"Invalid dates: the exam date ({options.exam_date}) must be after "
            f"the start date ({options.start_date})."
        )
    all_dates = date_range(start, last_study)
    study_dates = [
        format_date(d) for d in all_dates if not is_rest_day(d, options.rest_days_per_week)
    ]
    sundays = [format_date(d) for d in all_dates if d.weekday() == SUNDAY]
    return CalendarWindow(all_dates=all_dates, study_dates=study_dates, sundays=sundays)


def mock_window_size(total_study_days: int) -> int:
    if total_study_days >= 45:
        return 14
    elif total_study_days >= 30:
        return 10
    elif total_study_days >= 20:
        return 7
    return max(3, math.floor(total_study_days * 0.25))


def mock_exam_count(total_study_days: int) -> int:
    if total_study_days >= 40:
        return 6
    elif total_study_days >= 28:
        return 4
    elif total_study_days >= 18:
        return 2
    return 1


def split_mock_window(study_dates: list[str]) -> tuple[list[str], list[str]]:
    """Return (pre-mock dates, mock dates); the mock window is the tail."""
    pre_mock_days = max(0, len(study_dates) - mock_window_size(len(study_dates)))
    return study_dates[:pre_mock_days], study_dates[pre_mock_days:]


def interleave_topics(topics: list[Topic]) -> list[Topic]:
    """Merge both tracks, always drawing from the one with more minutes left.

    Each track is ordered by display_order. Ties go to the commercial track.
    """
    commercial = sorted((t for t in topics if t.subject == COMMERCIAL), key=lambda t: t.display_order)
    industrial = sorted((t for t in topics if t.subject == INDUSTRIAL), key=lambda t: t.display_order)
    remaining_commercial = sum(t.estimated_minutes for t in commercial)
    remaining_industrial = sum(t.estimated_minutes for t in industrial)

    order = []
    ci = ii = 0
    while ci < len(commercial) or ii < len(industrial):
        take_commercial = (
            ci < len(commercial) and remaining_commercial >= remaining_industrial
        ) or ii >= len(industrial)
        if take_commercial:
            topic = commercial[ci]
            ci += 1
            remaining_commercial -= topic.estimated_minutes
        else:
            topic = industrial[ii]
            ii += 1
            remaining_industrial -= topic.estimated_minutes
        order.append(topic)
    return order


def round5(minutes: float) -> int:
    """Round half-up to a multiple of 5, never below 5."""
    return max(5, math.floor(minutes / 5 + 0.5) * 5)


def expand_topic(topic: Topic) -> list[TaskSeed]:
    """A topic becomes one textbook (learn) task and one problem-book (drill) task."""
    total = topic.estimated_minutes
    learn = round5(max(MIN_TOPIC_TASK_MINUTES, total * LEARN_SHARE))
    drill = round5(max(MIN_TOPIC_TASK_MINUTES, total - learn))

    prefix = f"[{SUBJECT_LABELS[topic.subject]}] Topic {topic.code} {topic.title}"
    if topic.problem_page_start:
        page_info = f"problem book p{topic.problem_page_start}+"
    else:
        page_info = "problem book"

    return [
        TaskSeed(
            subject=topic.subject,
            topic_id=topic.id,
            task_type=LEARN,
            title=f"{prefix}: textbook & worked examples",
            planned_minutes=learn,
            meta={
                "topic_code": topic.code,
                "topic_title": topic.title,
                "resource": "textbook",
            },
        ),
        TaskSeed(
            subject=topic.subject,
            topic_id=topic.id,
            task_type=DRILL,
            title=f"{prefix}: {page_info}",
            planned_minutes=drill,
            meta={
                "topic_code": topic.code,
                "topic_title": topic.title,
                "resource": "problem_book",
                "problem_page_start": topic.problem_page_start,
            },
        ),
    ]


def _place(task: TaskSeed, task_date: str, minutes: int, suffix: str) -> TaskSeed:
    return replace(
        task,
        task_date=task_date,
        planned_minutes=minutes,
        title=f"{task.title} {suffix}" if suffix else task.title,
        meta=dict(task.meta),
    )


def pack_into_days(queue: list[TaskSeed], dates: list[str], capacity: int) -> list[TaskSeed]:
    """Greedily pour queued tasks into days holding `capacity` minutes each.

    A task that does not fit the rest of the current day is split: the part
    that fits is titled "(continued)", later parts "(continued 2)", "(continued 3)"...
    Minutes still unplaced when the dates run out are dropped.
    """
    placed = []
    day_index = 0
    remaining = capacity
    dropped = 0
    for task in queue:
        minutes_left = task.planned_minutes
        part = 1
        while minutes_left > 0:
            if day_index >= len(dates):
                dropped += minutes_left
                break
            if remaining <= 0:
                day_index += 1
                remaining = capacity
                continue
            if minutes_left <= remaining:
                suffix = f"(continued {part})" if part > 1 else ""
                placed.append(_place(task, dates[day_index], minutes_left, suffix))
                remaining -= minutes_left
                minutes_left = 0
            else:
                suffix = f"(continued {part})" if part > 1 else "(continued)"
                placed.append(_place(task, dates[day_index], remaining, suffix))
                minutes_left -= remaining
                remaining = 0
                part += 1

    if dropped:
        logger.warning(
            "Ran out of study days after %d day(s): %d minutes left unscheduled",
            len(dates), dropped,
        )
    return placed


def daily_review_minutes(daily_minutes: int) -> int:
    return min(DAILY_REVIEW_MINUTES, max(0, daily_minutes))


def daily_review_tasks(dates: list[str], minutes: int) -> list[TaskSeed]:
    if minutes <= 0:
        return []
    return [
        TaskSeed(
            task_date=d,
            subject=MIXED,
            task_type=REVIEW,
            title="[Daily] Mini review (fix yesterday's mistakes, check entries)",
            planned_minutes=minutes,
            meta={"kind": "daily"},
        )
        for d in dates
    ]


def weekly_review_tasks(sundays: list[str]) -> list[TaskSeed]:
    return [
        TaskSeed(
            task_date=d,
            subject=MIXED,
            task_type=WEEKLY_REVIEW,
            title="[Weekly] Progress review (check delays and weak topics, adjust next week)",
            planned_minutes=WEEKLY_REVIEW_MINUTES,
            meta={"kind": "weekly"},
        )
        for d in sundays
    ]


def mock_queue(count: int) -> list[TaskSeed]:
    """Mock exam + review pairs, closed by a single final check."""
    queue = []
    for mock_no in range(1, count + 1):
        queue.append(TaskSeed(
            subject=MIXED,
            task_type=MOCK,
            title=f"[Mixed] Full-length mock exam #{mock_no} ({MOCK_EXAM_MINUTES} min)",
            planned_minutes=MOCK_EXAM_MINUTES,
            meta={"mock_no": mock_no},
        ))
        queue.append(TaskSeed(
            subject=MIXED,
            task_type=REVIEW,
            title=f"[Mixed] Mock exam #{mock_no} review ({MOCK_REVIEW_MINUTES} min)",
            planned_minutes=MOCK_REVIEW_MINUTES,
            meta={"mock_no": mock_no},
        ))
    queue.append(TaskSeed(
        subject=MIXED,
        task_type=REVIEW,
        title="[Mixed] Final check (key entries, consolidation patterns)",
        planned_minutes=FINAL_CHECK_MINUTES,
        meta={"kind": "final_check"},
    ))
    return queue


def generate_tasks(topics: list[Topic], options: SchedulingOptions) -> list[TaskSeed]:
    """Build the full dated task list for a plan.

    Raises ConfigurationError when the exam date is not after the start date.
    The result is not sorted by date.
    """
    window = build_calendar_window(options)
    pre_mock_dates, mock_dates = split_mock_window(window.study_dates)
    mock_count = mock_exam_count(len(window.study_dates))
    review_minutes = daily_review_minutes(options.daily_minutes)
    capacity = max(0, options.daily_minutes - review_minutes)
    logger.debug(
        "Plan window %s..%s: %d study days (%d pre-mock, %d mock), %d mocks, %d min/day capacity",
        options.start_date, options.exam_date, len(window.study_dates),
        len(pre_mock_dates), len(mock_dates), mock_count, capacity,
    )

    topic_queue = []
    for topic in interleave_topics(topics):
        topic_queue.extend(expand_topic(topic))

    tasks = weekly_review_tasks(window.sundays)
    tasks.extend(daily_review_tasks(pre_mock_dates, review_minutes))
    tasks.extend(pack_into_days(topic_queue, pre_mock_dates, capacity))
    tasks.extend(daily_review_tasks(mock_dates, review_minutes))
    tasks.extend(pack_into_days(mock_queue(mock_count), mock_dates, capacity))
    return tasks


class StudyPlanScheduler:
    """Stateless service wrapper so callers can inject a scheduler."""

    def generate(self, topics: list[Topic], options: SchedulingOptions) -> list[TaskSeed]:
        return generate_tasks(topics, options)
