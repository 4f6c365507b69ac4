from typing import Any
from fastapi import APIRouter, Body, status

from dankpos.dependencies.dbDependencies import tenant_db_dependency
from dankpos.modules.orders.schemas import OrderCreate
from dankpos.modules.orders.service import OrderService

orders_router = APIRouter(prefix="/orders", tags=["Orders"])


@orders_router.get("")
async def list_orders(db: tenant_db_dependency):
    return await OrderService(db).list_orders()


@orders_router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(data: OrderCreate, db: tenant_db_dependency):
    return await OrderService(db).create_order(data)


@orders_router.put("")
async def update_orders(db: tenant_db_dependency, payload: Any = Body(...)):
    """Bulk update; entries without an id are ignored."""
    return await OrderService(db).update_orders(payload)
