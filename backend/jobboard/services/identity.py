"""
Identity Resolver and Identity Provider

The identity provider is the sole authority on credential validity: it
registers users, issues access tokens and verifies them. The resolver turns
a bearer credential into an Actor by asking the provider who the token
belongs to and then reading that user's role from their Profile.

Flow:
    credential ─► [IdentityCache] ─► IdentityProvider.get_user ─► Profile ─► Actor

Failure modes:
    - missing/invalid/revoked/expired credential  → Unauthenticated (401)
    - valid credential but no profile             → Forbidden (403)
    - profile deactivated by an admin             → Forbidden (403)
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jobboard.database import store_errors
from jobboard.enums import Role
from jobboard.errors import Forbidden, Unauthenticated, ValidationError
from jobboard.models import AuthUser, Profile, RevokedSession
from jobboard.services.session_cache import IdentityCache

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
BCRYPT_ROUNDS = 12


@dataclass
class Identity:
    id: str
    email: str


@dataclass
class Actor:
    """The authenticated identity making a request, with its resolved role."""

    id: str
    email: str
    role: Role
    credential: Optional[str] = field(default=None, repr=False)


@dataclass
class ProviderUser:
    id: str
    email: str
    user_metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None


@dataclass
class AuthSession:
    access_token: str
    expires_in: int
    expires_at: int
    token_type: str = "bearer"


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Salted bcrypt hash in the standard ``$2b$`` format."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash or an over-long password
        return False


class IdentityProvider(ABC):
    """Credential verification and session issuance."""

    @abstractmethod
    async def sign_up(
        self, email: str, password: str, metadata: Dict[str, Any]
    ) -> Tuple[ProviderUser, AuthSession]:
        pass

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Tuple[ProviderUser, AuthSession]:
        pass

    @abstractmethod
    async def get_user(self, access_token: str) -> Identity:
        pass

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        pass

    @abstractmethod
    async def delete_user(self, user_id: str) -> None:
        pass


class LocalIdentityProvider(IdentityProvider):
    """
    Identity provider backed by the auth_users table.

    Issues HS256 access tokens carrying ``sub``, ``email``, ``jti``, ``iat``
    and ``exp``. Sign-out records the token's ``jti`` as revoked.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        secret: str,
        expire_minutes: int = 60,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ):
        self.session_factory = session_factory
        self.secret = secret
        self.expire_minutes = expire_minutes
        self.bcrypt_rounds = bcrypt_rounds

    def _issue_session(self, user: ProviderUser) -> AuthSession:
        now = datetime.now(timezone.utc)
        expires = now + timedelta(minutes=self.expire_minutes)
        claims = {
            "sub": user.id,
            "email": user.email,
            "jti": uuid.uuid4().hex,
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
        }
        token = jwt.encode(claims, self.secret, algorithm=ALGORITHM)
        return AuthSession(
            access_token=token,
            expires_in=self.expire_minutes * 60,
            expires_at=claims["exp"],
        )

    def _decode(self, access_token: str, verify_exp: bool = True) -> Dict[str, Any]:
        try:
            claims = jwt.decode(
                access_token,
                self.secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": verify_exp},
            )
        except JWTError:
            raise Unauthenticated("Invalid or expired token")
        if not claims.get("sub") or not claims.get("jti"):
            raise Unauthenticated("Invalid or expired token")
        return claims

    @staticmethod
    def _to_user(row: AuthUser) -> ProviderUser:
        return ProviderUser(
            id=row.id,
            email=row.email,
            user_metadata=dict(row.user_metadata or {}),
            created_at=row.created_at,
        )

    async def sign_up(
        self, email: str, password: str, metadata: Dict[str, Any]
    ) -> Tuple[ProviderUser, AuthSession]:
        email = email.strip().lower()
        async with self.session_factory() as session:
            with store_errors("create account"):
                existing = await session.execute(select(AuthUser.id).where(AuthUser.email == email))
                if existing.scalar_one_or_none():
                    raise ValidationError("User already registered")

                row = AuthUser(
                    id=str(uuid.uuid4()),
                    email=email,
                    password_hash=hash_password(password, rounds=self.bcrypt_rounds),
                    user_metadata=metadata,
                )
                session.add(row)
                try:
                    await session.commit()
                except IntegrityError:
                    await session.rollback()
                    raise ValidationError("User already registered")

        user = self._to_user(row)
        logger.info(f"Registered identity {user.id}")
        return user, self._issue_session(user)

    async def sign_in(self, email: str, password: str) -> Tuple[ProviderUser, AuthSession]:
        email = email.strip().lower()
        async with self.session_factory() as session:
            with store_errors("sign in"):
                result = await session.execute(select(AuthUser).where(AuthUser.email == email))
                row = result.scalar_one_or_none()

        if row is None or not verify_password(password, row.password_hash):
            raise Unauthenticated("Invalid login credentials")

        user = self._to_user(row)
        return user, self._issue_session(user)

    async def get_user(self, access_token: str) -> Identity:
        claims = self._decode(access_token)
        async with self.session_factory() as session:
            with store_errors("verify credential"):
                revoked = await session.get(RevokedSession, claims["jti"])
                row = await session.get(AuthUser, claims["sub"])

        if revoked is not None or row is None:
            raise Unauthenticated("Invalid or expired token")
        return Identity(id=row.id, email=row.email)

    async def sign_out(self, access_token: str) -> None:
        claims = self._decode(access_token, verify_exp=False)
        async with self.session_factory() as session:
            with store_errors("sign out"):
                if await session.get(RevokedSession, claims["jti"]) is not None:
                    return
                session.add(
                    RevokedSession(
                        jti=claims["jti"],
                        user_id=claims["sub"],
                        expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
                    )
                )
                await session.commit()

    async def delete_user(self, user_id: str) -> None:
        async with self.session_factory() as session:
            with store_errors("delete identity"):
                await session.execute(delete(AuthUser).where(AuthUser.id == user_id))
                await session.commit()


class IdentityResolver:
    """
    Resolve bearer credentials to Actors.

    Re-run on every request. When an IdentityCache is configured, successful
    resolutions are cached for its TTL.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        session: AsyncSession,
        cache: Optional[IdentityCache] = None,
    ):
        self.provider = provider
        self.session = session
        self.cache = cache

    async def resolve(self, credential: Optional[str]) -> Actor:
        if not credential:
            raise Unauthenticated("No authorization token provided")

        if self.cache is not None:
            cached = await self.cache.get(credential)
            if cached:
                return Actor(
                    id=cached["id"],
                    email=cached["email"],
                    role=Role(cached["role"]),
                    credential=credential,
                )

        identity = await self.provider.get_user(credential)

        with store_errors("load profile"):
            profile = await self.session.get(Profile, identity.id)

        if profile is None:
            raise Forbidden("Profile not found")
        if not profile.is_active:
            raise Forbidden("Account is deactivated")

        actor = Actor(
            id=identity.id,
            email=identity.email,
            role=Role(profile.role),
            credential=credential,
        )
        if self.cache is not None:
            await self.cache.set(
                credential, {"id": actor.id, "email": actor.email, "role": actor.role.value}
            )
        return actor

    async def forget(self, credential: str) -> None:
        if self.cache is not None:
            await self.cache.invalidate(credential)
