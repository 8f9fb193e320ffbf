"""Subject hierarchy ORM models (subject > topic > sub-topic)."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from studypace.db.base import Base


class Subject(Base):
    __tablename__ = "subjects"
    __table_args__ = (Index("ix_subjects_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), nullable=False)
    name = Column(Text, nullable=False)
    color = Column(String(length=16), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Topic(Base):
    __tablename__ = "topics"
    __table_args__ = (Index("ix_topics_subject_id", "subject_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    subject_id = Column(UUID(as_uuid=True), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SubTopic(Base):
    __tablename__ = "sub_topics"
    __table_args__ = (Index("ix_sub_topics_topic_id", "topic_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    topic_id = Column(UUID(as_uuid=True), ForeignKey("topics.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
