from fastapi import APIRouter

from dankpos.dependencies.dbDependencies import tenant_db_dependency
from dankpos.modules.members.service import MemberService

members_router = APIRouter(prefix="/members", tags=["Members"])


@members_router.get("")
async def list_members(db: tenant_db_dependency):
    return await MemberService(db).list_members()


@members_router.delete("/{member_id}")
async def delete_member(member_id: str, db: tenant_db_dependency):
    return await MemberService(db).delete_member(member_id)
