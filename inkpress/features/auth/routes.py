from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from inkpress.db.supabase import get_supabase
from .schemas import AuthResult, LoginRequest, LogoutResponse, RegisterRequest
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(client: Any = Depends(get_supabase)) -> AuthService:
    return AuthService(client)


@router.post("/login", response_model=AuthResult)
async def login(data: LoginRequest, service: AuthService = Depends(get_auth_service)) -> AuthResult:
    return AuthResult(**await service.login(data.email, data.password))


@router.post("/register", response_model=AuthResult, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, service: AuthService = Depends(get_auth_service)) -> AuthResult:
    return AuthResult(**await service.register(data.email, data.password, data.username))


@router.post("/logout", response_model=LogoutResponse)
async def logout(request: Request, service: AuthService = Depends(get_auth_service)) -> LogoutResponse:
    await service.logout()
    request.state.current_user = None
    return LogoutResponse()


@router.get("/me", response_model=AuthResult)
async def me(service: AuthService = Depends(get_auth_service)) -> AuthResult:
    current = await service.current()
    if current is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return AuthResult(**current)
