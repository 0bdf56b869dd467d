"""User account routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.core.permissions import Action, Resource
from app.routes.dependencies import get_authenticated_principal, get_user_service, require_capability
from app.schemas.auth import AuthPrincipal
from app.schemas.common import MessageResponse
from app.schemas.error import ERROR_RESPONSES
from app.schemas.user import (
    AuthResponse,
    DeletedUserResponse,
    LoginRequest,
    PublicUserListResponse,
    RegisterRequest,
    SessionResponse,
    UpdateProfileRequest,
    UpdateUserRequest,
    UserListResponse,
    UserResponse,
)
from app.services.users import UserService

router = APIRouter(prefix="/user", tags=["Users"], responses=ERROR_RESPONSES)

UserId = Annotated[str, Path(min_length=1, max_length=100)]


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> AuthResponse:
    return service.register(payload)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> AuthResponse:
    return service.login(payload)


@router.post("/logout", response_model=MessageResponse)
def logout(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> MessageResponse:
    return MessageResponse(message=service.logout(principal))


@router.get("/session", response_model=SessionResponse)
def get_session(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> SessionResponse:
    return service.session(principal)


@router.get("/profile", response_model=UserResponse)
def get_profile(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    return service.get_profile(principal)


@router.put("/profile", response_model=UserResponse)
def update_profile(
    payload: UpdateProfileRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    return service.update_profile(principal, payload)


@router.delete("/profile", response_model=DeletedUserResponse)
def delete_profile(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> DeletedUserResponse:
    return service.delete_profile(principal)


@router.get("/public/all", response_model=PublicUserListResponse)
def list_public_users(service: Annotated[UserService, Depends(get_user_service)]) -> PublicUserListResponse:
    return service.list_public()


@router.get("", response_model=UserListResponse)
def list_users(
    _: Annotated[AuthPrincipal, Depends(require_capability(Resource.USERS, Action.LIST))],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserListResponse:
    return service.list_users()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: UserId,
    _: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    return service.get_user(user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: UserId,
    payload: UpdateUserRequest,
    principal: Annotated[AuthPrincipal, Depends(require_capability(Resource.USERS, Action.UPDATE))],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    return service.update_user(principal, user_id, payload)


@router.delete("/{user_id}", response_model=DeletedUserResponse)
def delete_user(
    user_id: UserId,
    principal: Annotated[AuthPrincipal, Depends(require_capability(Resource.USERS, Action.DELETE))],
    service: Annotated[UserService, Depends(get_user_service)],
) -> DeletedUserResponse:
    return service.delete_user(principal, user_id)
