"""Per-request bundle of the core services."""
from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from studypace.core.config import settings
from studypace.db.store import RelationalStore
from studypace.services.capacity import CapacityService
from studypace.services.error_handler import ErrorHandler
from studypace.services.focus_sessions import FocusSessionRecorder
from studypace.services.missed_tasks import MissedTaskService
from studypace.services.profile import ProfileService
from studypace.services.smart_today import SuggestionRanker
from studypace.services.streaks import StreakTracker
from studypace.services.sync_queue import SyncQueue
from studypace.services.tasks import TaskService


@dataclass
class CoreServices:
    """Services sharing one store and the process-wide sync queue."""

    store: RelationalStore
    queue: SyncQueue
    errors: ErrorHandler = field(init=False)
    capacity: CapacityService = field(init=False)
    streaks: StreakTracker = field(init=False)
    tasks: TaskService = field(init=False)
    missed: MissedTaskService = field(init=False)
    ranker: SuggestionRanker = field(init=False)
    focus: FocusSessionRecorder = field(init=False)
    profiles: ProfileService = field(init=False)

    def __post_init__(self) -> None:
        self.errors = ErrorHandler(self.queue)
        self.capacity = CapacityService(self.store)
        self.streaks = StreakTracker(self.store)
        self.tasks = TaskService(self.store, self.capacity, self.errors, self.streaks)
        self.missed = MissedTaskService(self.store, self.errors, limit=settings.missed_tasks_limit)
        self.ranker = SuggestionRanker(self.store)
        self.focus = FocusSessionRecorder(self.store, self.errors)
        self.profiles = ProfileService(self.store, self.capacity, self.errors)

    @classmethod
    def for_session(cls, db: Session, queue: SyncQueue) -> "CoreServices":
        return cls(RelationalStore(db), queue)
