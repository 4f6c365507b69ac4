from typing import Optional
from fastapi import APIRouter, Query, status

from dankpos.dependencies.dbDependencies import tenant_db_dependency
from dankpos.modules.categories.schemas import CategoryCreate
from dankpos.modules.categories.service import CategoryService

categories_router = APIRouter(prefix="/categories", tags=["Categories"])


@categories_router.get("")
async def list_categories(db: tenant_db_dependency):
    return await CategoryService(db).list_categories()


@categories_router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate, db: tenant_db_dependency):
    return await CategoryService(db).create_category(data)


@categories_router.delete("")
async def delete_category(db: tenant_db_dependency, id: Optional[str] = Query(None)):
    return await CategoryService(db).delete_category(id)
