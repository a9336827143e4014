"""Login and current-user routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from cms_backend.admins import AdminRepository
from cms_backend.auth import Principal, TokenService
from cms_backend.dependencies import (
    get_admin_repository,
    get_current_principal,
    get_token_service,
)
from cms_backend.schemas import ChangePasswordPayload, LoginPayload, envelope

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(
    payload: LoginPayload,
    admins: AdminRepository = Depends(get_admin_repository),
    tokens: TokenService = Depends(get_token_service),
):
    admin = await admins.authenticate(payload.email, payload.password)
    principal = Principal(
        id=admin["id"], email=admin["email"], role=admin["role"], name=admin["name"]
    )
    return envelope(
        {"token": tokens.issue(principal), "user": principal.as_dict()},
        message="Login realizado com sucesso",
    )


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordPayload,
    admins: AdminRepository = Depends(get_admin_repository),
    principal: Principal = Depends(get_current_principal),
):
    await admins.change_own_password(
        principal.id, payload.current_password, payload.new_password
    )
    return envelope(message="Senha alterada com sucesso")


@router.get("/me")
async def me(
    admins: AdminRepository = Depends(get_admin_repository),
    principal: Principal = Depends(get_current_principal),
):
    admin = await admins.get(principal.id)
    return envelope(
        {
            "user": {
                "id": admin["id"],
                "name": admin["name"],
                "email": admin["email"],
                "role": admin["role"],
                "last_login": admin.get("last_login"),
            }
        }
    )
