"""
Symposium Service - Symposiums, consultants, templates and API configuration.

A consultant created from a template takes the template's api_type as its
type tag and, when no prompt is given, the template's default prompt. The
type tag does not change after creation.
"""
from typing import Any, Dict, List, Optional, Tuple

from symposium.consultants.config_store import ApiConfigStore, mask_config
from symposium.consultants.factory import resolve_consultant_type
from symposium.core.exceptions import ConfigurationMissingError, NotFoundError, ValidationError
from symposium.core.logging_config import get_logger
from symposium.core.validators import validate_consultant_type, validate_required_fields
from symposium.database.connection import DatabaseConnection, get_database
from symposium.database.models import Consultant, ConsultantTemplate, Symposium

logger = get_logger(__name__)

# Required fields for consultants created without a template
DEFAULT_REQUIRED_FIELDS = {
    "airtable": ["base_id", "api_key"],
    "perplexity": ["api_key"],
}


class SymposiumService:
    """
    CRUD for symposiums and consultants.

    Example:
        >>> service = SymposiumService()
        >>> symposium = service.create_symposium("Launch plan", "Go-to-market for v2")
        >>> service.create_consultant(symposium["id"], "Analyst", "openai/gpt-4o", template_id=2)
    """

    def __init__(self, db: Optional[DatabaseConnection] = None, config_store: Optional[ApiConfigStore] = None):
        self.db = db or get_database()
        self.config_store = config_store or ApiConfigStore(self.db)

    # ============================================================
    # Symposiums
    # ============================================================

    def list_symposiums(self) -> List[Dict[str, Any]]:
        with self.db.get_session() as session:
            rows = session.query(Symposium).order_by(Symposium.created_at.desc(), Symposium.id.desc()).all()
            return [s.to_dict() for s in rows]

    def get_symposium(self, symposium_id: int) -> Dict[str, Any]:
        """Symposium with its consultants."""
        with self.db.get_session() as session:
            symposium = session.get(Symposium, symposium_id)
            if symposium is None:
                raise NotFoundError("Symposium", symposium_id)
            data = symposium.to_dict()
            data["consultants"] = [c.to_dict() for c in symposium.consultants]
            return data

    def create_symposium(self, name: str, description: str = "") -> Dict[str, Any]:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Symposium name cannot be empty", field="name")

        with self.db.get_session() as session:
            symposium = Symposium(name=name, description=(description or "").strip())
            session.add(symposium)
            session.flush()
            logger.info(f"Created symposium {symposium.id}: {name}")
            return symposium.to_dict()

    def update_symposium(
        self, symposium_id: int, name: Optional[str] = None, description: Optional[str] = None
    ) -> Dict[str, Any]:
        with self.db.get_session() as session:
            symposium = session.get(Symposium, symposium_id)
            if symposium is None:
                raise NotFoundError("Symposium", symposium_id)
            if name is not None:
                if not name.strip():
                    raise ValidationError("Symposium name cannot be empty", field="name")
                symposium.name = name.strip()
            if description is not None:
                symposium.description = description.strip()
            session.flush()
            return symposium.to_dict()

    def delete_symposium(self, symposium_id: int) -> None:
        """Delete a symposium with its consultants and messages."""
        with self.db.get_session() as session:
            symposium = session.get(Symposium, symposium_id)
            if symposium is None:
                raise NotFoundError("Symposium", symposium_id)
            session.delete(symposium)
        logger.info(f"Deleted symposium {symposium_id}")

    # ============================================================
    # Templates
    # ============================================================

    def list_templates(self) -> List[Dict[str, Any]]:
        with self.db.get_session() as session:
            rows = session.query(ConsultantTemplate).order_by(ConsultantTemplate.name).all()
            return [t.to_dict() for t in rows]

    # ============================================================
    # Consultants
    # ============================================================

    def list_consultants(self, symposium_id: Optional[int] = None) -> List[Dict[str, Any]]:
        with self.db.get_session() as session:
            query = session.query(Consultant)
            if symposium_id is not None:
                query = query.filter(Consultant.symposium_id == symposium_id)
            return [c.to_dict() for c in query.order_by(Consultant.created_at, Consultant.id).all()]

    def get_consultant(self, consultant_id: int) -> Dict[str, Any]:
        with self.db.get_session() as session:
            consultant = session.get(Consultant, consultant_id)
            if consultant is None:
                raise NotFoundError("Consultant", consultant_id)
            return consultant.to_dict()

    def create_consultant(
        self,
        symposium_id: int,
        name: str,
        model: str,
        system_prompt: Optional[str] = None,
        template_id: Optional[int] = None,
        consultant_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a consultant, optionally from a template.

        Raises:
            NotFoundError: Unknown symposium or template
            ValidationError: Missing name, model or prompt, or unknown type
        """
        if not (name or "").strip():
            raise ValidationError("Consultant name cannot be empty", field="name")
        if not (model or "").strip():
            raise ValidationError("Consultant model cannot be empty", field="model")

        is_valid, error = validate_consultant_type(consultant_type)
        if not is_valid:
            raise ValidationError(error, field="consultant_type")

        with self.db.get_session() as session:
            if session.get(Symposium, symposium_id) is None:
                raise NotFoundError("Symposium", symposium_id)

            if template_id is not None:
                template = session.get(ConsultantTemplate, template_id)
                if template is None:
                    raise NotFoundError("Template", template_id)
                system_prompt = (system_prompt or "").strip() or template.default_system_prompt
                consultant_type = template.api_type

            if not (system_prompt or "").strip():
                raise ValidationError("System prompt cannot be empty", field="system_prompt")

            consultant = Consultant(
                symposium_id=symposium_id,
                name=name.strip(),
                model=model.strip(),
                system_prompt=system_prompt.strip(),
                template_id=template_id,
                consultant_type=consultant_type or "pure_llm",
            )
            session.add(consultant)
            session.flush()
            logger.info(
                f"Created consultant {consultant.id} ({consultant.consultant_type}) "
                f"in symposium {symposium_id}"
            )
            return consultant.to_dict()

    def update_consultant(
        self,
        consultant_id: int,
        name: Optional[str] = None,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Update name, model or prompt; the type tag is fixed at creation."""
        with self.db.get_session() as session:
            consultant = session.get(Consultant, consultant_id)
            if consultant is None:
                raise NotFoundError("Consultant", consultant_id)
            for field_name, value in (("name", name), ("model", model), ("system_prompt", system_prompt)):
                if value is None:
                    continue
                if not value.strip():
                    raise ValidationError(f"Consultant {field_name} cannot be empty", field=field_name)
                setattr(consultant, field_name, value.strip())
            session.flush()
            return consultant.to_dict()

    def delete_consultant(self, consultant_id: int) -> None:
        with self.db.get_session() as session:
            consultant = session.get(Consultant, consultant_id)
            if consultant is None:
                raise NotFoundError("Consultant", consultant_id)
            session.delete(consultant)
        logger.info(f"Deleted consultant {consultant_id}")

    # ============================================================
    # API configuration
    # ============================================================

    def _type_and_required_fields(self, consultant_id: int) -> Tuple[str, List[str]]:
        with self.db.get_session() as session:
            consultant = session.get(Consultant, consultant_id)
            if consultant is None:
                raise NotFoundError("Consultant", consultant_id)
            template = (
                session.get(ConsultantTemplate, consultant.template_id)
                if consultant.template_id is not None else None
            )
            api_type = resolve_consultant_type(
                template.api_type if template else None, consultant.consultant_type
            )
            required = template.required_fields if template else DEFAULT_REQUIRED_FIELDS.get(api_type, [])
        return api_type, required

    def save_api_config(self, consultant_id: int, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a consultant's API configuration.

        Raises:
            NotFoundError: Unknown consultant
            ValidationError: Consultant type has no API, or required fields missing
        """
        api_type, required = self._type_and_required_fields(consultant_id)
        if api_type not in DEFAULT_REQUIRED_FIELDS:
            raise ValidationError(
                f"Consultants of type '{api_type}' do not use an external API", field="config"
            )

        is_valid, error = validate_required_fields(config, required)
        if not is_valid:
            raise ValidationError(error, field="config")

        cleaned = {k: v.strip() if isinstance(v, str) else v for k, v in config.items()}
        self.config_store.save(consultant_id, api_type, cleaned)
        return {"consultant_id": consultant_id, "api_type": api_type, "config": mask_config(cleaned)}

    def get_api_config(self, consultant_id: int) -> Dict[str, Any]:
        """Active configuration with secrets masked."""
        api_type, config = self.load_api_config(consultant_id)
        return {"consultant_id": consultant_id, "api_type": api_type, "config": mask_config(config)}

    def load_api_config(self, consultant_id: int) -> Tuple[str, Dict[str, Any]]:
        """
        Active configuration, unmasked.

        Raises:
            NotFoundError: Unknown consultant
            ConfigurationMissingError: No active configuration
        """
        self.get_consultant(consultant_id)
        loaded = self.config_store.load(consultant_id)
        if loaded is None:
            raise ConfigurationMissingError(
                "No API configuration for this consultant", consultant_id=consultant_id
            )
        return loaded

    def delete_api_config(self, consultant_id: int) -> bool:
        self.get_consultant(consultant_id)
        return self.config_store.deactivate(consultant_id)
