from studypace.db.base import Base
from studypace.db import models  # noqa: F401  ensure models are loaded


def test_metadata_contains_core_tables() -> None:
    table_names = set(Base.metadata.tables.keys())
    expected = {
        "user_profiles",
        "capacity",
        "capacity_overrides",
        "subjects",
        "topics",
        "sub_topics",
        "tasks",
        "exam_modes",
        "exam_tasks",
        "missed_task_reasons",
        "user_streaks",
        "focus_sessions",
    }

    assert expected == table_names
