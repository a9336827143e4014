"""Administrator account routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from cms_backend.admins import AdminRepository
from cms_backend.auth import Principal
from cms_backend.dependencies import get_admin_repository, require_admin
from cms_backend.schemas import (
    AdminCreatePayload,
    AdminUpdatePayload,
    SetPasswordPayload,
    envelope,
)

router = APIRouter(prefix="/admins", tags=["admins"])


@router.get("")
async def list_admins(
    admins: AdminRepository = Depends(get_admin_repository),
    _: Principal = Depends(require_admin),
):
    items = await admins.list_all()
    return envelope(items, total=len(items))


@router.post("", status_code=201)
async def create_admin(
    payload: AdminCreatePayload,
    admins: AdminRepository = Depends(get_admin_repository),
    principal: Principal = Depends(require_admin),
):
    admin = await admins.create(principal, payload.present_fields())
    return envelope(admin, message="Administrador criado com sucesso")


@router.put("/{admin_id}")
async def update_admin(
    admin_id: int,
    payload: AdminUpdatePayload,
    admins: AdminRepository = Depends(get_admin_repository),
    principal: Principal = Depends(require_admin),
):
    admin = await admins.update(principal, admin_id, payload.present_fields())
    return envelope(admin, message="Administrador atualizado com sucesso")


@router.delete("/{admin_id}")
async def delete_admin(
    admin_id: int,
    admins: AdminRepository = Depends(get_admin_repository),
    principal: Principal = Depends(require_admin),
):
    await admins.delete(principal, admin_id)
    return envelope(message="Administrador excluído com sucesso")


@router.put("/{admin_id}/password")
async def set_admin_password(
    admin_id: int,
    payload: SetPasswordPayload,
    admins: AdminRepository = Depends(get_admin_repository),
    principal: Principal = Depends(require_admin),
):
    await admins.set_password(principal, admin_id, payload.new_password)
    return envelope(message="Senha alterada com sucesso")
