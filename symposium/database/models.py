"""
Database Models - SQLAlchemy ORM models for the symposium store.

Symposiums own consultants and messages. Consultants may reference a
template and hold one encoded external API configuration. Knowledge base
cards are global and can be tagged.
"""
import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, String, Table, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


card_tags = Table(
    "card_tags",
    Base.metadata,
    Column("card_id", Integer, ForeignKey("knowledge_base_cards.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime, default=datetime.utcnow, nullable=False),
)


class Symposium(Base):
    """A named conversation workspace."""
    __tablename__ = "symposiums"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    consultants = relationship(
        "Consultant",
        back_populates="symposium",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Consultant.created_at",
    )
    messages = relationship(
        "Message",
        back_populates="symposium",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.timestamp",
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": _iso(self.created_at),
        }


class ConsultantTemplate(Base):
    """Read-only seed data describing a consultant type."""
    __tablename__ = "consultant_templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    display_name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    api_type = Column(String(50), nullable=False)
    default_system_prompt = Column(Text, nullable=False)
    required_config_fields = Column(Text, nullable=False, default="[]")  # JSON array
    icon = Column(String(16), default="🤖")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def required_fields(self) -> List[str]:
        return json.loads(self.required_config_fields or "[]")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "description": self.description,
            "api_type": self.api_type,
            "default_system_prompt": self.default_system_prompt,
            "required_config_fields": self.required_fields,
            "icon": self.icon,
        }


class Consultant(Base):
    """A persona bound to an LLM, optionally backed by a data source."""
    __tablename__ = "consultants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symposium_id = Column(Integer, ForeignKey("symposiums.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    model = Column(String(200), nullable=False)
    system_prompt = Column(Text, nullable=False)
    template_id = Column(Integer, ForeignKey("consultant_templates.id", ondelete="SET NULL"), nullable=True)
    consultant_type = Column(String(50), nullable=True, default="pure_llm")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    symposium = relationship("Symposium", back_populates="consultants")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "symposium_id": self.symposium_id,
            "name": self.name,
            "model": self.model,
            "system_prompt": self.system_prompt,
            "template_id": self.template_id,
            "consultant_type": self.consultant_type,
            "created_at": _iso(self.created_at),
        }


class ExternalApiConfig(Base):
    """
    Per-consultant API configuration.

    config_json holds base64-encoded JSON. This is a reversible encoding,
    not encryption.
    """
    __tablename__ = "external_api_configs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    consultant_id = Column(
        Integer, ForeignKey("consultants.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    api_type = Column(String(50), nullable=False)
    config_json = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class ApiInteractionLog(Base):
    """One consultant pipeline run."""
    __tablename__ = "api_interaction_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    consultant_id = Column(Integer, ForeignKey("consultants.id", ondelete="CASCADE"), nullable=False)
    api_type = Column(String(50), nullable=False)
    request_data = Column(Text, nullable=True)   # JSON
    response_data = Column(Text, nullable=True)  # JSON
    success = Column(Boolean, default=False, nullable=False)
    error_message = Column(Text, nullable=True)
    execution_time_ms = Column(Integer, nullable=True)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)


class Message(Base):
    """A user turn or a consultant reply inside a symposium."""
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symposium_id = Column(Integer, ForeignKey("symposiums.id", ondelete="CASCADE"), nullable=False)
    consultant_id = Column(Integer, ForeignKey("consultants.id", ondelete="SET NULL"), nullable=True)
    content = Column(Text, nullable=False)
    is_user = Column(Boolean, default=False, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    symposium = relationship("Symposium", back_populates="messages")
    consultant = relationship("Consultant", lazy="joined")
    visibility = relationship(
        "MessageVisibility",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "symposium_id": self.symposium_id,
            "consultant_id": self.consultant_id,
            "consultant_name": self.consultant.name if self.consultant else None,
            "content": self.content,
            "is_user": self.is_user,
            "timestamp": _iso(self.timestamp),
            "updated_at": _iso(self.updated_at),
            "visibility": [
                {"consultant_id": v.consultant_id, "is_hidden": v.is_hidden}
                for v in sorted(self.visibility, key=lambda v: v.consultant_id)
            ],
        }


class MessageVisibility(Base):
    """Hides a message from one consultant's context."""
    __tablename__ = "message_visibility"
    __table_args__ = (UniqueConstraint("message_id", "consultant_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    message_id = Column(Integer, ForeignKey("messages.id", ondelete="CASCADE"), nullable=False)
    consultant_id = Column(Integer, ForeignKey("consultants.id", ondelete="CASCADE"), nullable=False)
    is_hidden = Column(Boolean, default=False, nullable=False)


class Tag(Base):
    """Label for knowledge base cards."""
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    color = Column(String(7), nullable=False, default="#4f46e5")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "color": self.color}


class KnowledgeCard(Base):
    """Reusable context snippet injected into consultant prompts while visible."""
    __tablename__ = "knowledge_base_cards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symposium_id = Column(Integer, ForeignKey("symposiums.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    card_type = Column(String(30), nullable=False, default="user_created")
    source_message_id = Column(Integer, ForeignKey("messages.id", ondelete="SET NULL"), nullable=True)
    is_visible = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    tags = relationship("Tag", secondary=card_tags, lazy="selectin", order_by="Tag.name")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "symposium_id": self.symposium_id,
            "title": self.title,
            "content": self.content,
            "card_type": self.card_type,
            "source_message_id": self.source_message_id,
            "is_visible": self.is_visible,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "tags": [tag.to_dict() for tag in self.tags],
        }
