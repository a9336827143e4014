"""
Administrator accounts.

Invariant: at least one active ``super_admin`` exists at all times. Account
management (create/update/delete) is reserved to super admins here, in the
repository, rather than at the HTTP gate.
"""

from __future__ import annotations

import logging
from typing import Optional

from cms_backend.auth import ADMIN_ROLES, PasswordHasher, Principal
from cms_backend.dates import iso_timestamp
from cms_backend.errors import (
    ConstraintViolation,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from cms_backend.repository import (
    JsonRepository,
    apply_whitelist,
    find_index,
    next_id,
    require_fields,
    validate_email,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
# bcrypt only looks at the first 72 bytes.
MAX_PASSWORD_BYTES = 72
UPDATE_FIELDS = ("name", "email", "role", "active")


def public_view(admin: dict) -> dict:
    return {key: value for key, value in admin.items() if key != "password_hash"}


def _validate_password(password: Optional[str]) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres"
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"A senha deve ter no máximo {MAX_PASSWORD_BYTES} bytes"
        )


def _validate_role(role: str) -> None:
    if role not in ADMIN_ROLES:
        raise ValidationError("Perfil inválido: use 'admin' ou 'super_admin'")


def _require_super_admin(actor: Principal) -> None:
    if not actor.is_super_admin:
        raise ForbiddenError(
            "Acesso negado. Privilégios de super administrador requeridos."
        )


def _other_active_super_admins(admins: list[dict], admin_id: int) -> int:
    return sum(
        1
        for admin in admins
        if admin.get("role") == "super_admin"
        and admin.get("active")
        and admin.get("id") != admin_id
    )


class AdminRepository(JsonRepository):
    collection = "admins"

    def __init__(
        self,
        store,
        hasher: PasswordHasher,
        bootstrap_email: str,
        bootstrap_password: str,
    ):
        super().__init__(store)
        self.hasher = hasher
        self.bootstrap_email = bootstrap_email
        self.bootstrap_password = bootstrap_password

    def _default(self):
        async def bootstrap() -> list[dict]:
            now = iso_timestamp()
            logger.warning("Creating bootstrap super_admin %s", self.bootstrap_email)
            return [
                {
                    "id": 1,
                    "name": "Administrador Principal",
                    "email": self.bootstrap_email,
                    "password_hash": await self.hasher.hash(self.bootstrap_password),
                    "role": "super_admin",
                    "active": True,
                    "created_at": now,
                    "updated_at": now,
                    "last_login": None,
                }
            ]

        return bootstrap

    async def list_all(self) -> list[dict]:
        return [public_view(admin) for admin in await self._load()]

    async def get(self, admin_id: int) -> dict:
        admins = await self._load()
        index = find_index(admins, admin_id)
        if index == -1:
            raise NotFoundError("Administrador não encontrado")
        return public_view(admins[index])

    async def create(self, actor: Principal, fields: dict) -> dict:
        _require_super_admin(actor)
        require_fields(fields, ("name", "email", "password"))
        validate_email(fields["email"])
        _validate_password(fields["password"])
        role = fields.get("role") or "admin"
        _validate_role(role)

        admins = await self._load()
        if any(admin.get("email") == fields["email"] for admin in admins):
            raise ConstraintViolation("Já existe um administrador com este email")

        now = iso_timestamp()
        admin = {
            "id": next_id(admins),
            "name": fields["name"],
            "email": fields["email"],
            "password_hash": await self.hasher.hash(fields["password"]),
            "role": role,
            "active": True,
            "created_at": now,
            "updated_at": now,
            "last_login": None,
        }
        admins.append(admin)
        await self._save(admins, "Erro ao salvar administrador")
        logger.info("Admin #%s created by #%s", admin["id"], actor.id)
        return public_view(admin)

    async def update(self, actor: Principal, admin_id: int, fields: dict) -> dict:
        _require_super_admin(actor)
        admins = await self._load()
        index = find_index(admins, admin_id)
        if index == -1:
            raise NotFoundError("Administrador não encontrado")
        admin = admins[index]

        if fields.get("role"):
            _validate_role(fields["role"])
        if fields.get("active") is not None and not isinstance(fields["active"], bool):
            raise ValidationError("O campo active deve ser booleano")

        loses_super_admin = admin.get("role") == "super_admin" and admin.get("active") and (
            fields.get("active") is False
            or (fields.get("role") and fields["role"] != "super_admin")
        )
        if loses_super_admin and _other_active_super_admins(admins, admin_id) == 0:
            raise ConstraintViolation(
                "Não é possível desativar o último super administrador"
            )

        email = fields.get("email")
        if email and email != admin.get("email"):
            validate_email(email)
            if any(
                other.get("email") == email and other.get("id") != admin_id
                for other in admins
            ):
                raise ConstraintViolation("Já existe um administrador com este email")

        apply_whitelist(admin, fields, UPDATE_FIELDS)
        admin["updated_at"] = iso_timestamp()
        await self._save(admins, "Erro ao atualizar administrador")
        return public_view(admin)

    async def delete(self, actor: Principal, admin_id: int) -> dict:
        _require_super_admin(actor)
        admins = await self._load()
        index = find_index(admins, admin_id)
        if index == -1:
            raise NotFoundError("Administrador não encontrado")

        target = admins[index]
        if (
            target.get("role") == "super_admin"
            and target.get("active")
            and _other_active_super_admins(admins, admin_id) == 0
        ):
            raise ConstraintViolation(
                "Não é possível excluir o último super administrador"
            )

        removed = admins.pop(index)
        await self._save(admins, "Erro ao excluir administrador")
        logger.info("Admin #%s deleted by #%s", admin_id, actor.id)
        return public_view(removed)

    async def set_password(
        self, actor: Principal, admin_id: int, new_password: Optional[str]
    ) -> None:
        if not actor.is_super_admin and actor.id != admin_id:
            raise ForbiddenError("Acesso negado.")
        _validate_password(new_password)

        admins = await self._load()
        index = find_index(admins, admin_id)
        if index == -1:
            raise NotFoundError("Administrador não encontrado")
        admins[index]["password_hash"] = await self.hasher.hash(new_password)
        admins[index]["updated_at"] = iso_timestamp()
        await self._save(admins, "Erro ao alterar senha")

    async def change_own_password(
        self, admin_id: int, current_password: Optional[str], new_password: Optional[str]
    ) -> None:
        if not current_password or not new_password:
            raise ValidationError("Senha atual e nova senha são obrigatórias")
        _validate_password(new_password)

        admins = await self._load()
        index = find_index(admins, admin_id)
        if index == -1:
            raise NotFoundError("Usuário não encontrado")
        if not await self.hasher.verify(
            current_password, admins[index].get("password_hash")
        ):
            raise UnauthenticatedError("Senha atual incorreta")

        admins[index]["password_hash"] = await self.hasher.hash(new_password)
        admins[index]["updated_at"] = iso_timestamp()
        await self._save(admins, "Erro ao alterar senha")

    async def authenticate(self, email: Optional[str], password: Optional[str]) -> dict:
        """Check credentials for an active admin and stamp `last_login`."""
        if not email or not password:
            raise ValidationError("Email e senha são obrigatórios")

        admins = await self._load()
        admin = next(
            (a for a in admins if a.get("email") == email and a.get("active")), None
        )
        if admin is None or not await self.hasher.verify(
            password, admin.get("password_hash")
        ):
            raise UnauthenticatedError("Credenciais inválidas")

        admin["last_login"] = iso_timestamp()
        if not await self.store.save(self.collection, admins):
            logger.error("Could not record last_login for admin #%s", admin["id"])
        logger.info("Admin #%s logged in", admin["id"])
        return public_view(admin)
