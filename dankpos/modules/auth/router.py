from fastapi import APIRouter, Response

from dankpos.database.resolver import clear_credential_markers, set_credential_markers
from dankpos.dependencies.dbDependencies import host_db_dependency
from dankpos.modules.auth.schemas import LoginRequest, MessageResponse
from dankpos.modules.auth.service import AuthService

auth_router = APIRouter()


@auth_router.post("/login")
async def login(data: LoginRequest, response: Response, host_db: host_db_dependency):
    """
    Log in by NFC uid or username/password.
    Sets the shop's credential cookies and returns the user without secrets.
    """
    auth_service = AuthService(host_db)
    user, credentials = await auth_service.login(data)
    set_credential_markers(response, credentials)
    return {**user, "shop_name": credentials.shop_name}


@auth_router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """
    Expire the shop's credential cookies.
    """
    clear_credential_markers(response)
    return {"message": "Logged out successfully"}
