"""Data classes for the study-plan domain model."""
from dataclasses import dataclass, field
from typing import Optional

COMMERCIAL = "commercial"
INDUSTRIAL = "industrial"
MIXED = "mixed"

TRACKS = (COMMERCIAL, INDUSTRIAL)
SUBJECTS = (COMMERCIAL, INDUSTRIAL, MIXED)

SUBJECT_LABELS = {
    COMMERCIAL: "Commercial",
    INDUSTRIAL: "Industrial",
    MIXED: "Mixed",
}

LEARN = "learn"
DRILL = "drill"
REVIEW = "review"
MOCK = "mock"
WEEKLY_REVIEW = "weekly_review"

TASK_TYPES = (LEARN, DRILL, REVIEW, MOCK, WEEKLY_REVIEW)


@dataclass
class Topic:
    id: str
    subject: str
    code: str
    title: str
    display_order: int
    estimated_minutes: int
    problem_page_start: Optional[int] = None
    weight: float = 1.0


@dataclass
class SchedulingOptions:
    start_date: str  # YYYY-MM-DD
    exam_date: str  # YYYY-MM-DD, never a study day
    daily_minutes: int
    rest_days_per_week: int = 1


@dataclass
class TaskSeed:
    subject: str
    task_type: str
    title: str
    planned_minutes: int
    topic_id: Optional[str] = None
    meta: dict = field(default_factory=dict)
    task_date: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "task_date": self.task_date,
            "subject": self.subject,
            "topic_id": self.topic_id,
            "task_type": self.task_type,
            "title": self.title,
            "planned_minutes": self.planned_minutes,
            "meta": dict(self.meta),
        }
