from typing import Any
from fastapi import APIRouter, Body, status

from dankpos.dependencies.dbDependencies import tenant_db_dependency
from dankpos.modules.admin_users.schemas import AdminUserCreate
from dankpos.modules.admin_users.service import AdminUserService

admin_users_router = APIRouter(prefix="/admin_users", tags=["Admin users"])


@admin_users_router.get("")
async def list_admin_users(db: tenant_db_dependency):
    return await AdminUserService(db).list_users()


@admin_users_router.post("", status_code=status.HTTP_201_CREATED)
async def create_admin_user(data: AdminUserCreate, db: tenant_db_dependency):
    return await AdminUserService(db).create_user(data)


@admin_users_router.put("")
async def upsert_admin_users(db: tenant_db_dependency, payload: Any = Body(...)):
    return await AdminUserService(db).upsert_users(payload)
