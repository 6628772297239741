import json
import logging
import os
from typing import Optional

from pydantic import ValidationError

from insiders.core.config import settings
from insiders.models.session import SessionContext

logger = logging.getLogger(__name__)

class SessionStore:
    """
    Persists the console's SessionContext as a JSON file.
    Passwords are never written; an admin session is marked by its email.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.SESSION_FILE

    def load(self) -> SessionContext:
        if not os.path.exists(self.path):
            return SessionContext()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return SessionContext.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return SessionContext()

    def save(self, context: SessionContext) -> SessionContext:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(self.path, "w", encoding="utf-8") as f:
            f.write(context.model_dump_json())
        return context

    def clear(self) -> SessionContext:
        if os.path.exists(self.path):
            os.remove(self.path)
        return SessionContext()
