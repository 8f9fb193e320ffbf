"""ORM models exposed for metadata discovery."""
from studypace.db.models.capacity import CapacityOverride, UserCapacity
from studypace.db.models.exam_mode import ExamMode, ExamTask
from studypace.db.models.focus_session import FocusSession
from studypace.db.models.missed_task_reason import MissedTaskReason
from studypace.db.models.subject import Subject, SubTopic, Topic
from studypace.db.models.task import Task
from studypace.db.models.user_profile import UserProfile
from studypace.db.models.user_streak import UserStreak

__all__ = [
    "CapacityOverride",
    "ExamMode",
    "ExamTask",
    "FocusSession",
    "MissedTaskReason",
    "SubTopic",
    "Subject",
    "Task",
    "Topic",
    "UserCapacity",
    "UserProfile",
    "UserStreak",
]
