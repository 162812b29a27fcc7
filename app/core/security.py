"""Bearer-token authentication dependency."""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.exceptions import UnauthorizedError

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True, slots=True)
class Actor:
    """The authenticated caller."""

    id: str


async def get_current_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Actor:
    """Resolve the bearer token to an actor; raise 401 when missing or unknown."""
    if credentials is None:
        raise UnauthorizedError()

    for token, actor_id in settings.api_tokens.items():
        if secrets.compare_digest(credentials.credentials, token):
            return Actor(id=actor_id)

    raise UnauthorizedError("Invalid API token")
