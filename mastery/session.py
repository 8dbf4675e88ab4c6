from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from mastery.errors import StorageUnavailableError
from mastery.kvstore import KeyValueBackend
from mastery.models import User

logger = logging.getLogger(__name__)

SESSION_KEY = "currentUser"

# Fixed demo accounts; this table is not a security boundary.
USERS = {
    "student1": {"password": "s1pass", "user": User(id="student1", name="Student 1", role="student")},
    "student2": {"password": "s2pass", "user": User(id="student2", name="Student 2", role="student")},
    "mentor": {"password": "mentorpass", "user": User(id="mentor", name="Mentor", role="mentor")},
}


class SessionHolder:
    """The single logged-in identity, persisted next to the collections."""

    def __init__(self, backend: KeyValueBackend):
        self.backend = backend

    def current_user(self) -> User | None:
        stored = self.backend.read(SESSION_KEY)
        if stored is None:
            return None
        try:
            return User.model_validate(json.loads(stored.value))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise StorageUnavailableError("Stored session is unreadable") from exc

    def login(self, username: str, password: str) -> User | None:
        record = USERS.get((username or "").strip())
        if record is None or record["password"] != password:
            logger.info("Rejected login for %r", username)
            return None
        user = record["user"]
        self.backend.write(SESSION_KEY, json.dumps(user.to_json_dict()))
        logger.info("Logged in %s (%s)", user.id, user.role)
        return user

    def logout(self) -> None:
        self.backend.delete(SESSION_KEY)

    def is_authenticated(self) -> bool:
        return self.current_user() is not None
