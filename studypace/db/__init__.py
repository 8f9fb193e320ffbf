"""Database utilities and models."""

from studypace.db.base import Base
from studypace.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
