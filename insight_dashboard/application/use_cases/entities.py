from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ...domain.errors import ValidationError
from ...domain.interfaces import AnalyticsBackend
from ...domain.models import Event, User
from ...infrastructure.logging import get_logger
from ..dto import CreateEventRequest, CreateUserRequest
from ..validators import optional_int, parse_float, parse_int, require_text

logger = get_logger("insight_dashboard.entities")


class EntityUseCase:
    """Use-case: browse and edit users and events."""

    def __init__(self, backend: AnalyticsBackend) -> None:
        self._backend = backend

    def list_users(self) -> List[User]:
        return self._backend.list_users()

    def get_user(self, user_id: str) -> User:
        return self._backend.get_user(require_text(user_id, "User id"))

    def user_events(self, user_id: str) -> List[Event]:
        return self._backend.user_events(require_text(user_id, "User id"))

    def list_events(self, limit: Optional[int] = None) -> List[Event]:
        events = self._backend.list_events()
        return events if limit is None else events[:limit]

    def get_event(self, event_id: str) -> Event:
        return self._backend.get_event(require_text(event_id, "Event id"))

    def create_user(self, req: CreateUserRequest) -> Any:
        """Validate the form and create the user.

        Raises:
            ValidationError: Missing id/name/email or a non-numeric age.
        """
        user_id = require_text(req.user_id, "User id")
        properties: Dict[str, Any] = {
            "name": require_text(req.name, "Name"),
            "email": require_text(req.email, "Email"),
            "country": (req.country or "").strip(),
        }
        age = optional_int(req.age, "Age")
        if age is not None:
            properties["age"] = age
        logger.info("Create user | id=%s", user_id)
        return self._backend.create_user(user_id, properties)

    def update_user(self, user_id: str, properties: Dict[str, Any]) -> Any:
        """Replace properties on an existing user; ``age`` must be an integer."""
        uid = require_text(user_id, "User id")
        props = dict(properties or {})
        if not props:
            raise ValidationError("Update needs at least one property")
        if "age" in props:
            props["age"] = parse_int(props["age"], "Age")
        logger.info("Update user | id=%s | keys=%s", uid, sorted(props))
        return self._backend.update_user(uid, props)

    def delete_user(self, user_id: str) -> Any:
        uid = require_text(user_id, "User id")
        logger.info("Delete user | id=%s", uid)
        return self._backend.delete_user(uid)

    def create_event(self, req: CreateEventRequest) -> Any:
        """Validate and send a new event; numeric item properties are coerced."""
        event_name = require_text(req.event_name, "Event type")
        user_id = require_text(req.user_id, "User")
        properties = dict(req.properties or {})
        if properties.get("price") not in (None, ""):
            properties["price"] = parse_float(properties["price"], "Price")
        if properties.get("quantity") not in (None, ""):
            properties["quantity"] = parse_int(properties["quantity"], "Quantity")
        logger.info("Create event | name=%s | user=%s", event_name, user_id)
        return self._backend.create_event(event_name, user_id, properties)

    def user_choices(self) -> List[Tuple[str, str]]:
        """(user_id, "id (name)") pairs for user pickers."""
        return [(u.user_id, f"{u.user_id} ({u.name or 'Unknown'})") for u in self._backend.list_users()]

    def system_config(self) -> Dict[str, Any]:
        return self._backend.system_config()

    def save_data(self) -> Any:
        return self._backend.save_data()

    def load_data(self) -> Any:
        return self._backend.load_data()
