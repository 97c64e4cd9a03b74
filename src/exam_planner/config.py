"""Settings read from the environment."""
import logging
import os

from exam_planner.curriculum import DEFAULT_CURRICULUM_PATH

logger = logging.getLogger(__name__)


def env_int(name: str, default: int, allowed=None) -> int:
    """Integer setting from the environment; bad values fall back to the default."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a whole number", name, raw)
        return default
    if allowed is not None and value not in allowed:
        logger.warning("Ignoring %s=%r: out of range", name, raw)
        return default
    return value


CURRICULUM_PATH = os.environ.get("EXAM_PLANNER_CURRICULUM", str(DEFAULT_CURRICULUM_PATH))
LOG_LEVEL = os.environ.get("EXAM_PLANNER_LOG_LEVEL", "WARNING").upper()
DEFAULT_DAILY_MINUTES = env_int("EXAM_PLANNER_DAILY_MINUTES", 120, allowed=range(1, 24 * 60 + 1))
DEFAULT_REST_DAYS = env_int("EXAM_PLANNER_REST_DAYS", 1, allowed=(0, 1, 2))
