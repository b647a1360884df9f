"""
Knowledge Service - Knowledge base cards and tags.

Visible cards are added to every consultant's context by ChatService.
Cards without a symposium apply to all symposiums.
"""
from typing import Any, Dict, Iterable, List, Optional

from symposium.core.exceptions import NotFoundError, ValidationError
from symposium.core.logging_config import get_logger
from symposium.core.validators import validate_tag_color
from symposium.database.connection import DatabaseConnection, get_database
from symposium.database.models import KnowledgeCard, Message, Symposium, Tag

logger = get_logger(__name__)

CARD_TYPES = {"user_created", "from_message"}
TITLE_FROM_MESSAGE_LENGTH = 50


class KnowledgeService:
    """CRUD for knowledge cards and tags."""

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_database()

    # ============================================================
    # Cards
    # ============================================================

    def list_cards(self, symposium_id: Optional[int] = None, visible_only: bool = False) -> List[Dict[str, Any]]:
        with self.db.get_session() as session:
            query = session.query(KnowledgeCard)
            if symposium_id is not None:
                query = query.filter(
                    (KnowledgeCard.symposium_id == symposium_id) | KnowledgeCard.symposium_id.is_(None)
                )
            if visible_only:
                query = query.filter(KnowledgeCard.is_visible.is_(True))
            cards = query.order_by(KnowledgeCard.created_at.desc(), KnowledgeCard.id.desc()).all()
            return [c.to_dict() for c in cards]

    def create_card(
        self,
        title: str,
        content: str,
        symposium_id: Optional[int] = None,
        card_type: str = "user_created",
        source_message_id: Optional[int] = None,
        tag_ids: Iterable[int] = (),
    ) -> Dict[str, Any]:
        if not (title or "").strip():
            raise ValidationError("Card title cannot be empty", field="title")
        if not (content or "").strip():
            raise ValidationError("Card content cannot be empty", field="content")
        if card_type not in CARD_TYPES:
            raise ValidationError(f"Invalid card_type: {card_type}", field="card_type")

        with self.db.get_session() as session:
            if symposium_id is not None and session.get(Symposium, symposium_id) is None:
                raise NotFoundError("Symposium", symposium_id)

            card = KnowledgeCard(
                symposium_id=symposium_id,
                title=title.strip(),
                content=content.strip(),
                card_type=card_type,
                source_message_id=source_message_id,
            )
            card.tags = self._load_tags(session, tag_ids)
            session.add(card)
            session.flush()
            logger.info(f"Created knowledge card {card.id} ({card_type})")
            return card.to_dict()

    def update_card(self, card_id: int, title: Optional[str] = None, content: Optional[str] = None) -> Dict[str, Any]:
        with self.db.get_session() as session:
            card = self._get_card(session, card_id)
            if title is not None:
                if not title.strip():
                    raise ValidationError("Card title cannot be empty", field="title")
                card.title = title.strip()
            if content is not None:
                if not content.strip():
                    raise ValidationError("Card content cannot be empty", field="content")
                card.content = content.strip()
            session.flush()
            return card.to_dict()

    def delete_card(self, card_id: int) -> None:
        with self.db.get_session() as session:
            session.delete(self._get_card(session, card_id))
        logger.info(f"Deleted knowledge card {card_id}")

    def set_card_visibility(self, card_id: int, is_visible: bool) -> Dict[str, Any]:
        with self.db.get_session() as session:
            card = self._get_card(session, card_id)
            card.is_visible = is_visible
            session.flush()
            return card.to_dict()

    def card_from_message(self, message_id: int, title: Optional[str] = None) -> Dict[str, Any]:
        """Save a chat message as a knowledge card."""
        with self.db.get_session() as session:
            message = session.get(Message, message_id)
            if message is None:
                raise NotFoundError("Message", message_id)
            content, symposium_id = message.content, message.symposium_id

        if not (title or "").strip():
            first_line = content.strip().splitlines()[0] if content.strip() else "Saved message"
            title = first_line[:TITLE_FROM_MESSAGE_LENGTH]

        return self.create_card(
            title=title,
            content=content,
            symposium_id=symposium_id,
            card_type="from_message",
            source_message_id=message_id,
        )

    def set_card_tags(self, card_id: int, tag_ids: Iterable[int]) -> Dict[str, Any]:
        """Replace a card's tags."""
        with self.db.get_session() as session:
            card = self._get_card(session, card_id)
            card.tags = self._load_tags(session, tag_ids)
            session.flush()
            return card.to_dict()

    @staticmethod
    def _get_card(session, card_id: int) -> KnowledgeCard:
        card = session.get(KnowledgeCard, card_id)
        if card is None:
            raise NotFoundError("KnowledgeCard", card_id)
        return card

    @staticmethod
    def _load_tags(session, tag_ids: Iterable[int]) -> List[Tag]:
        tags = []
        for tag_id in dict.fromkeys(tag_ids):
            tag = session.get(Tag, tag_id)
            if tag is None:
                raise NotFoundError("Tag", tag_id)
            tags.append(tag)
        return tags

    # ============================================================
    # Tags
    # ============================================================

    def list_tags(self) -> List[Dict[str, Any]]:
        with self.db.get_session() as session:
            return [t.to_dict() for t in session.query(Tag).order_by(Tag.name).all()]

    def create_tag(self, name: str, color: str = "#4f46e5") -> Dict[str, Any]:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Tag name cannot be empty", field="name")

        is_valid, error = validate_tag_color(color)
        if not is_valid:
            raise ValidationError(error, field="color")

        with self.db.get_session() as session:
            if session.query(Tag).filter(Tag.name == name).first() is not None:
                raise ValidationError(f"Tag already exists: {name}", field="name")
            tag = Tag(name=name, color=color)
            session.add(tag)
            session.flush()
            return tag.to_dict()
