"""Load curriculum topics from JSON or YAML files."""
import json
import logging
from pathlib import Path

from exam_planner.models import TRACKS, Topic

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"
DEFAULT_CURRICULUM_PATH = CONTENT_DIR / "curriculum.json"

REQUIRED_FIELDS = ("id", "subject", "code", "title", "display_order", "estimated_minutes")


class CurriculumError(ValueError):
    """Raised when a curriculum file holds records that can't become topics."""


def read_curriculum_file(file_path) -> list[dict]:
    """Return the raw topic records in a .json, .yaml or .yml file."""
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
    elif suffix in (".yaml", ".yml"):
        import yaml
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    else:
        raise CurriculumError(f"Unsupported curriculum format: {path.name}")

    if isinstance(data, dict):
        data = data.get("topics", [])
    if not isinstance(data, list):
        raise CurriculumError(f"{path.name}: expected a list of topics")
    return data


def topic_from_record(record: dict) -> Topic:
    if not isinstance(record, dict):
        raise CurriculumError(f"Topic record must be a mapping: {record!r}")
    missing = [name for name in REQUIRED_FIELDS if record.get(name) is None]
    if missing:
        raise CurriculumError(f"Topic record is missing {', '.join(missing)}: {record!r}")
    if record["subject"] not in TRACKS:
        raise CurriculumError(f"Topic {record['id']}: unknown subject {record['subject']!r}")
    minutes = int(record["estimated_minutes"])
    if minutes <= 0:
        raise CurriculumError(f"Topic {record['id']}: estimated_minutes must be positive")

    page = record.get("problem_page_start")
    return Topic(
        id=str(record["id"]),
        subject=record["subject"],
        code=str(record["code"]),
        title=record["title"],
        display_order=int(record["display_order"]),
        estimated_minutes=minutes,
        problem_page_start=int(page) if page is not None else None,
        weight=float(record.get("weight", 1.0)),
    )


def sort_topics(topics: list[Topic]) -> list[Topic]:
    return sorted(topics, key=lambda t: (TRACKS.index(t.subject), t.display_order))


def load_curriculum(file_path=None) -> list[Topic]:
    """Load and validate topics, defaulting to the bundled curriculum."""
    path = Path(file_path) if file_path else DEFAULT_CURRICULUM_PATH
    topics = [topic_from_record(r) for r in read_curriculum_file(path)]
    seen = set()
    for topic in topics:
        if topic.id in seen:
            raise CurriculumError(f"Duplicate topic id: {topic.id}")
        seen.add(topic.id)
    logger.debug("Loaded %d topics from %s", len(topics), path)
    return sort_topics(topics)


def topics_by_subject(topics: list[Topic]) -> dict[str, list[Topic]]:
    grouped = {subject: [] for subject in TRACKS}
    for topic in topics:
        grouped.setdefault(topic.subject, []).append(topic)
    return grouped
