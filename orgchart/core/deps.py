"""
Dependencies and guards for FastAPI endpoints
"""
from collections.abc import MutableMapping
from typing import Dict, Generator, Iterator, Optional
from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from orgchart.core.actor import Actor, ActorProvider, AuditContext, TokenActorProvider
from orgchart.core.config import AuditConfig, settings
from orgchart.db.session import SessionLocal
from orgchart.repositories.audit_log_store import AuditLogStore
from orgchart.repositories.entity_repository import build_entity_repositories
from orgchart.services.audit_query_service import AuditQueryService
from orgchart.services.audit_service import AuditRecorder
from orgchart.services.identity_cache import (
    HttpNetworkOriginLookup,
    IdentityContextCache,
    SESSION_TOKEN_KEY,
)
from orgchart.services.rollback_service import RollbackEngine


security = HTTPBearer(auto_error=False)

_identity_cache: Optional[IdentityContextCache] = None


def get_db() -> Generator:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_audit_config() -> AuditConfig:
    return settings.audit_config()


def get_identity_cache() -> IdentityContextCache:
    """Process-wide cache so the network origin TTL spans requests"""
    global _identity_cache
    if _identity_cache is None:
        lookup = None
        if settings.NETWORK_ORIGIN_LOOKUP_ENABLED:
            lookup = HttpNetworkOriginLookup(
                settings.NETWORK_ORIGIN_LOOKUP_URL,
                timeout=settings.IO_TIMEOUT_SECONDS,
            )
        _identity_cache = IdentityContextCache(
            lookup, ttl_seconds=settings.NETWORK_ORIGIN_CACHE_TTL_SECONDS
        )
    return _identity_cache


class CookieSessionStorage(MutableMapping):
    """Session-scoped storage backed by a browser-session cookie"""

    def __init__(self, request: Request, response: Response, cookie_name: str):
        self.response = response
        self.cookie_name = cookie_name
        self._values: Dict[str, str] = {}
        existing = request.cookies.get(cookie_name)
        if existing:
            self._values[SESSION_TOKEN_KEY] = existing

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._values[key] = value
        if key == SESSION_TOKEN_KEY:
            # No max_age: the cookie lives as long as the browser session
            self.response.set_cookie(self.cookie_name, value, httponly=True, samesite="lax")

    def __delitem__(self, key: str) -> None:
        del self._values[key]
        if key == SESSION_TOKEN_KEY:
            self.response.delete_cookie(self.cookie_name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)


def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Actor]:
    """Actor from the bearer token, or None for anonymous callers"""
    token = credentials.credentials if credentials else None
    provider: ActorProvider = TokenActorProvider(token)
    return provider.current_actor()


def require_actor(actor: Optional[Actor] = Depends(get_current_actor)) -> Actor:
    """Guard for mutation endpoints"""
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def get_audit_context(
    request: Request,
    response: Response,
    actor: Optional[Actor] = Depends(get_current_actor),
    identity: IdentityContextCache = Depends(get_identity_cache),
    config: AuditConfig = Depends(get_audit_config),
) -> AuditContext:
    """Resolve actor and provenance once per request"""
    storage = CookieSessionStorage(request, response, settings.SESSION_COOKIE_NAME)
    return AuditContext(
        organization_id=config.organization_id,
        actor=actor,
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
        session_id=identity.get_session_token(storage),
    )


def get_audit_recorder(
    db: Session = Depends(get_db),
    identity: IdentityContextCache = Depends(get_identity_cache),
    config: AuditConfig = Depends(get_audit_config),
) -> AuditRecorder:
    return AuditRecorder(AuditLogStore(db), identity, config)


def get_audit_query_service(
    db: Session = Depends(get_db),
    config: AuditConfig = Depends(get_audit_config),
) -> AuditQueryService:
    return AuditQueryService(AuditLogStore(db), config)


def get_rollback_engine(
    db: Session = Depends(get_db),
    recorder: AuditRecorder = Depends(get_audit_recorder),
    config: AuditConfig = Depends(get_audit_config),
) -> RollbackEngine:
    return RollbackEngine(AuditLogStore(db), build_entity_repositories(db), recorder, config)
