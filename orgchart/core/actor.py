"""
Actor resolution and the per-request audit context
"""
import logging
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict

from orgchart.core.security import decode_token

logger = logging.getLogger(__name__)


class Actor(BaseModel):
    """Authenticated caller on whose behalf an action is recorded"""
    email: str
    display_name: str

    model_config = ConfigDict(frozen=True)


class AuditContext(BaseModel):
    """
    Request provenance threaded explicitly through every audit operation

    Built once per request; components never look up the current user on their own.
    """
    organization_id: str
    actor: Optional[Actor] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    session_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_authenticated(self) -> bool:
        return self.actor is not None


class ActorProvider(Protocol):
    def current_actor(self) -> Optional[Actor]:
        ...


class TokenActorProvider:
    """Resolves the actor from a bearer JWT; missing or invalid tokens mean no actor"""

    def __init__(self, token: Optional[str]):
        self.token = token

    def current_actor(self) -> Optional[Actor]:
        if not self.token:
            return None
        try:
            payload = decode_token(self.token)
        except ValueError:
            logger.debug("Ignoring invalid bearer token")
            return None

        email = payload.get("email") or payload.get("sub")
        if not email:
            return None
        email = str(email)
        return Actor(email=email, display_name=str(payload.get("name") or email))
