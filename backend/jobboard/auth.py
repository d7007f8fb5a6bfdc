"""
Request authentication dependencies

    get_current_actor   bearer token → Actor (401/403 on failure)
    require_role(...)   allow-list of roles on top of get_current_actor
    get_admin_db        elevated store session, only after admin is verified
"""

from typing import AsyncIterator, Callable, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.database import get_database, get_db
from jobboard.enums import Role
from jobboard.policy import check_role
from jobboard.services.identity import Actor, IdentityProvider, IdentityResolver
from jobboard.services.session_cache import IdentityCache

BEARER_PREFIX = "Bearer "


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_identity_cache(request: Request) -> Optional[IdentityCache]:
    return request.app.state.identity_cache


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):].strip() or None


async def get_resolver(
    db: AsyncSession = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
    cache: Optional[IdentityCache] = Depends(get_identity_cache),
) -> IdentityResolver:
    return IdentityResolver(provider, db, cache)


async def get_current_actor(
    authorization: Optional[str] = Header(None),
    resolver: IdentityResolver = Depends(get_resolver),
) -> Actor:
    return await resolver.resolve(extract_bearer(authorization))


def require_role(*allowed_roles: Role) -> Callable:
    """Build a dependency that resolves the actor and checks its role."""

    async def dependency(actor: Actor = Depends(get_current_actor)) -> Actor:
        check_role(actor, allowed_roles)
        return actor

    return dependency


require_admin = require_role(Role.ADMIN)


async def get_admin_db(
    request: Request,
    actor: Actor = Depends(require_admin),
) -> AsyncIterator[AsyncSession]:
    async with get_database(request).admin_session_factory() as session:
        yield session
