"""
Chat Service - Runs chat turns and manages symposium messages.

A chat turn:
1. Loads the symposium and the consultant
2. Collects the messages visible to that consultant and the visible
   knowledge cards
3. Stores the user message
4. Builds the conversation context
5. Resolves the consultant's strategy and runs the pipeline
6. Stores the consultant's reply

If the pipeline raises, the error reaches the caller and the user
message stays stored; no partial reply is written.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import or_, select

from symposium.consultants.base import ConsultantProfile
from symposium.consultants.config_store import ApiConfigStore
from symposium.consultants.factory import create_consultant
from symposium.consultants.pipeline import ConsultantPipeline
from symposium.core.audit import AuditSink, DatabaseAuditSink
from symposium.core.config import get_settings
from symposium.core.exceptions import NotFoundError, ValidationError
from symposium.core.logging_config import get_logger
from symposium.core.validators import validate_message
from symposium.database.connection import DatabaseConnection, get_database
from symposium.database.models import (
    Consultant, KnowledgeCard, Message, MessageVisibility, Symposium,
)
from symposium.llm.client import LLMClient, get_llm_client
from symposium.llm.prompts import build_context_prompt

logger = get_logger(__name__)


@dataclass
class ChatTurnResult:
    """The two messages stored by one chat turn."""
    user_message: Dict[str, Any]
    consultant_message: Dict[str, Any]


class ChatService:
    """
    Service for chat turns and message management.

    Example:
        >>> service = ChatService()
        >>> result = service.handle_turn(symposium_id=1, consultant_id=2, message="Hello!")
        >>> result.consultant_message["content"]
        'Hello! How can I help with your launch plan?'
    """

    def __init__(
        self,
        db: Optional[DatabaseConnection] = None,
        llm_client: Optional[LLMClient] = None,
        audit_sink: Optional[AuditSink] = None,
        config_store: Optional[ApiConfigStore] = None,
    ):
        self.db = db or get_database()
        self.llm_client = llm_client
        self.audit_sink = audit_sink if audit_sink is not None else DatabaseAuditSink(self.db)
        self.config_store = config_store or ApiConfigStore(self.db)
        self.context_limit = get_settings().context_message_limit

    # ============================================================
    # Chat turns
    # ============================================================

    def handle_turn(self, symposium_id: int, consultant_id: int, message: str) -> ChatTurnResult:
        """
        Run one chat turn with one consultant.

        Raises:
            ValidationError: Empty or oversized message, or a consultant
                from another symposium
            NotFoundError: Unknown symposium or consultant
            SymposiumError: Any failure the consultant pipeline re-raises
        """
        is_valid, sanitized, error = validate_message(message)
        if not is_valid:
            raise ValidationError(error, field="message")

        with self.db.get_session() as session:
            symposium = session.get(Symposium, symposium_id)
            if symposium is None:
                raise NotFoundError("Symposium", symposium_id)

            consultant = session.get(Consultant, consultant_id)
            if consultant is None:
                raise NotFoundError("Consultant", consultant_id)
            if consultant.symposium_id != symposium_id:
                raise ValidationError(
                    f"Consultant {consultant_id} does not belong to symposium {symposium_id}",
                    field="consultant_id",
                )

            history = [
                (self._speaker(m), m.content)
                for m in self._visible_history(session, symposium_id, consultant_id)
            ]
            knowledge = [(c.title, c.content) for c in self._visible_cards(session, symposium_id)]
            profile = ConsultantProfile.from_model(consultant)
            context = build_context_prompt(
                symposium.name, symposium.description, consultant.system_prompt, history, knowledge
            )

        user_message = self.add_message(symposium_id, sanitized, is_user=True)

        logger.info(
            f"Chat turn: symposium={symposium_id}, consultant={consultant_id}, "
            f"history={len(history)}, knowledge_cards={len(knowledge)}"
        )

        strategy = create_consultant(
            profile,
            db=self.db,
            llm_client=self.llm_client or get_llm_client(),
            config_store=self.config_store,
        )
        reply = ConsultantPipeline(strategy, self.audit_sink).process(sanitized, context)

        consultant_message = self.add_message(
            symposium_id, reply, is_user=False, consultant_id=consultant_id
        )

        logger.info(f"Chat turn complete: consultant={consultant_id}, reply_length={len(reply)}")
        return ChatTurnResult(user_message=user_message, consultant_message=consultant_message)

    def _visible_history(self, session, symposium_id: int, consultant_id: int) -> List[Message]:
        """Newest messages not hidden from the consultant, oldest first."""
        hidden = select(MessageVisibility.message_id).where(
            MessageVisibility.consultant_id == consultant_id,
            MessageVisibility.is_hidden.is_(True),
        )
        recent = (
            session.query(Message)
            .filter(Message.symposium_id == symposium_id, Message.id.not_in(hidden))
            .order_by(Message.timestamp.desc(), Message.id.desc())
            .limit(self.context_limit)
            .all()
        )
        return list(reversed(recent))

    @staticmethod
    def _visible_cards(session, symposium_id: int) -> List[KnowledgeCard]:
        return (
            session.query(KnowledgeCard)
            .filter(
                KnowledgeCard.is_visible.is_(True),
                or_(KnowledgeCard.symposium_id.is_(None), KnowledgeCard.symposium_id == symposium_id),
            )
            .order_by(KnowledgeCard.created_at)
            .all()
        )

    @staticmethod
    def _speaker(message: Message) -> str:
        if message.is_user:
            return "User"
        return message.consultant.name if message.consultant else "System"

    # ============================================================
    # Messages
    # ============================================================

    def list_messages(self, symposium_id: int) -> List[Dict[str, Any]]:
        """All messages of a symposium with their visibility flags, oldest first."""
        with self.db.get_session() as session:
            if session.get(Symposium, symposium_id) is None:
                raise NotFoundError("Symposium", symposium_id)
            messages = (
                session.query(Message)
                .filter(Message.symposium_id == symposium_id)
                .order_by(Message.timestamp, Message.id)
                .all()
            )
            return [m.to_dict() for m in messages]

    def add_message(
        self,
        symposium_id: int,
        content: str,
        is_user: bool,
        consultant_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Store a message and return it."""
        with self.db.get_session() as session:
            if session.get(Symposium, symposium_id) is None:
                raise NotFoundError("Symposium", symposium_id)
            message = Message(
                symposium_id=symposium_id,
                consultant_id=consultant_id,
                content=content,
                is_user=is_user,
            )
            session.add(message)
            session.flush()
            session.refresh(message)
            return message.to_dict()

    def edit_message(self, message_id: int, content: str) -> Dict[str, Any]:
        """Replace a message's content and stamp updated_at."""
        is_valid, sanitized, error = validate_message(content)
        if not is_valid:
            raise ValidationError(error, field="content")

        with self.db.get_session() as session:
            message = session.get(Message, message_id)
            if message is None:
                raise NotFoundError("Message", message_id)
            message.content = sanitized
            message.updated_at = datetime.utcnow()
            session.flush()
            return message.to_dict()

    def delete_message(self, message_id: int) -> None:
        with self.db.get_session() as session:
            message = session.get(Message, message_id)
            if message is None:
                raise NotFoundError("Message", message_id)
            session.delete(message)
        logger.info(f"Deleted message {message_id}")

    def set_visibility(self, message_id: int, consultant_id: int, is_hidden: bool) -> Dict[str, Any]:
        """Hide or show a message for one consultant."""
        with self.db.get_session() as session:
            if session.get(Message, message_id) is None:
                raise NotFoundError("Message", message_id)
            if session.get(Consultant, consultant_id) is None:
                raise NotFoundError("Consultant", consultant_id)

            row = (
                session.query(MessageVisibility)
                .filter_by(message_id=message_id, consultant_id=consultant_id)
                .first()
            )
            if row is None:
                row = MessageVisibility(message_id=message_id, consultant_id=consultant_id)
                session.add(row)
            row.is_hidden = is_hidden

        return {"message_id": message_id, "consultant_id": consultant_id, "is_hidden": is_hidden}

    def clear_messages(self, symposium_id: int) -> int:
        """
        Delete every message of a symposium.

        Returns:
            Number of messages deleted
        """
        with self.db.get_session() as session:
            if session.get(Symposium, symposium_id) is None:
                raise NotFoundError("Symposium", symposium_id)
            messages = session.query(Message).filter(Message.symposium_id == symposium_id).all()
            for message in messages:
                session.delete(message)
            count = len(messages)

        logger.info(f"Cleared {count} messages from symposium {symposium_id}")
        return count
