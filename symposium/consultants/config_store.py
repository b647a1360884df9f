"""
API Configuration Store - Per-consultant external API settings.

Configurations are stored as base64-encoded JSON in external_api_configs.
Base64 is a reversible encoding, not encryption: anyone with database
access can read the stored keys.
"""
import base64
import json
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from symposium.core.exceptions import ConfigurationMissingError
from symposium.core.logging_config import get_logger
from symposium.database.connection import DatabaseConnection, get_database
from symposium.database.models import ExternalApiConfig

logger = get_logger(__name__)

_SECRET_MARKERS = ("key", "token", "secret", "password")


def encode_config(config: Dict[str, Any]) -> str:
    """Encode a configuration dict for storage (reversible, not encryption)."""
    return base64.b64encode(json.dumps(config).encode("utf-8")).decode("ascii")


def decode_config(encoded: str) -> Dict[str, Any]:
    """
    Decode a stored configuration.

    Raises:
        ConfigurationMissingError: If the stored value cannot be decoded
    """
    try:
        return json.loads(base64.b64decode(encoded.encode("ascii")).decode("utf-8"))
    except ValueError as e:
        raise ConfigurationMissingError("Failed to decode stored API configuration") from e


def mask_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of config with secret-looking values masked for display."""
    masked = {}
    for name, value in config.items():
        if any(marker in name.lower() for marker in _SECRET_MARKERS) and value:
            text = str(value)
            masked[name] = f"{text[:4]}********" if len(text) > 8 else "********"
        else:
            masked[name] = value
    return masked


class ApiConfigStore:
    """
    Save, load and deactivate consultant API configurations.

    Example:
        >>> store = ApiConfigStore()
        >>> store.save(3, "airtable", {"base_id": "app123", "api_key": "pat..."})
        >>> store.load(3)
        ('airtable', {'base_id': 'app123', 'api_key': 'pat...'})
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_database()

    def save(self, consultant_id: int, api_type: str, config: Dict[str, Any]) -> None:
        """Insert or replace a consultant's configuration and mark it active."""
        with self.db.get_session() as session:
            row = session.query(ExternalApiConfig).filter_by(consultant_id=consultant_id).first()
            if row is None:
                row = ExternalApiConfig(consultant_id=consultant_id)
                session.add(row)
            row.api_type = api_type
            row.config_json = encode_config(config)
            row.is_active = True
            row.updated_at = datetime.utcnow()
        logger.info(f"Saved {api_type} API configuration for consultant={consultant_id}")

    def load(self, consultant_id: int) -> Optional[Tuple[str, Dict[str, Any]]]:
        """
        Load the active configuration.

        Returns:
            (api_type, config) or None if the consultant has no active configuration
        """
        with self.db.get_session() as session:
            row = (
                session.query(ExternalApiConfig)
                .filter_by(consultant_id=consultant_id, is_active=True)
                .first()
            )
            if row is None:
                return None
            api_type, encoded = row.api_type, row.config_json

        try:
            return api_type, decode_config(encoded)
        except ConfigurationMissingError as e:
            raise ConfigurationMissingError(e.message, consultant_id=consultant_id) from e

    def deactivate(self, consultant_id: int) -> bool:
        """
        Deactivate a configuration without deleting it.

        Returns:
            True if an active configuration was deactivated
        """
        with self.db.get_session() as session:
            updated = (
                session.query(ExternalApiConfig)
                .filter_by(consultant_id=consultant_id, is_active=True)
                .update({"is_active": False})
            )
        if updated:
            logger.info(f"Deactivated API configuration for consultant={consultant_id}")
        return bool(updated)
