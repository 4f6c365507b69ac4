from fastapi import APIRouter, Request, status

from dankpos.dependencies.dbDependencies import host_db_dependency
from dankpos.modules.sessions.schemas import SessionEnd, SessionStart
from dankpos.modules.sessions.service import SessionLogService

sessions_router = APIRouter(prefix="/sessions", tags=["Sessions"])


def client_ip(request: Request) -> str:
    return request.headers.get("x-forwarded-for") or request.headers.get("x-real-ip") or "N/A"


@sessions_router.post("", status_code=status.HTTP_201_CREATED)
async def start_session(data: SessionStart, request: Request, host_db: host_db_dependency):
    return await SessionLogService(host_db).start_session(data, client_ip(request))


@sessions_router.put("")
async def end_session(data: SessionEnd, host_db: host_db_dependency):
    return await SessionLogService(host_db).end_session(data)
