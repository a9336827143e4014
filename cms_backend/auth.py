"""
Access control: password hashing, signed tokens and the admin gate.
"""

from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass
from datetime import timedelta
from typing import Optional

import bcrypt
import jwt

from cms_backend.dates import utc_now
from cms_backend.errors import ForbiddenError, InvalidTokenError, UnauthenticatedError

ADMIN_ROLES = ("admin", "super_admin")
TOKEN_ALGORITHM = "HS256"


@dataclass(frozen=True)
class Principal:
    """The authenticated identity carried by a verified token."""

    id: int
    email: str
    role: str
    name: str = ""

    @property
    def is_super_admin(self) -> bool:
        return self.role == "super_admin"

    def as_dict(self) -> dict:
        return asdict(self)


class PasswordHasher:
    """One-way bcrypt hashes; plaintext is never stored.

    bcrypt runs in a worker thread, so only the awaiting request waits on it.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def _hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def _verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(self._hash, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        if not password or not password_hash:
            return False
        return await asyncio.to_thread(self._verify, password, password_hash)


class TokenService:
    """Issues and verifies time-limited HS256 tokens."""

    def __init__(self, secret: str, expire_hours: int = 24):
        self.secret = secret
        self.expire = timedelta(hours=expire_hours)

    def issue(self, principal: Principal) -> str:
        now = utc_now()
        claims = {
            **principal.as_dict(),
            "iat": now,
            "exp": now + self.expire,
        }
        return jwt.encode(claims, self.secret, algorithm=TOKEN_ALGORITHM)

    def verify(self, token: str) -> Principal:
        try:
            claims = jwt.decode(token, self.secret, algorithms=[TOKEN_ALGORITHM])
            return Principal(
                id=int(claims["id"]),
                email=claims["email"],
                role=claims["role"],
                name=claims.get("name", ""),
            )
        except (jwt.PyJWTError, KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError("Token inválido ou expirado") from e


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Second whitespace-separated part of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) < 2:
        return None
    return parts[1]


def authenticate(tokens: TokenService, authorization: Optional[str]) -> Principal:
    token = extract_bearer_token(authorization)
    if not token:
        raise UnauthenticatedError("Token de acesso requerido")
    return tokens.verify(token)


def authorize(principal: Principal) -> Principal:
    """The only capability modelled is 'administrator'."""
    if principal.role not in ADMIN_ROLES:
        raise ForbiddenError(
            "Acesso negado. Privilégios de administrador requeridos."
        )
    return principal
