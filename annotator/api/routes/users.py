"""
Identity endpoints: registration, login and user listing.

Routers only translate between HTTP and IdentityService; every rule
(unique id, single admin, credential checks) lives in the service.
"""

from fastapi import APIRouter, Depends

from annotator.api.dependencies import get_identity_service
from annotator.api.routes.metrics import logins_total, users_registered_total
from annotator.core.config import settings
from annotator.schemas import LoginRequest, RegisterRequest
from annotator.services import IdentityService


router = APIRouter(prefix="/api", tags=["users"])


@router.get("/users")
async def list_users(service: IdentityService = Depends(get_identity_service)):
    """All registered users, without any password material."""
    return [user.to_wire() for user in await service.list_users()]


@router.get("/admin-exists")
async def admin_exists(service: IdentityService = Depends(get_identity_service)):
    """Lets clients hide admin registration once an admin is registered."""
    return {"adminExists": await service.admin_exists()}


@router.post("/register")
async def register(body: RegisterRequest, service: IdentityService = Depends(get_identity_service)):
    """Create an account.

    Returns:
        dict: ``{message, user}`` with the public user view

    Raises:
        ValidationError: 400 on empty fields or unknown role
        ConflictError: 400 on duplicate id or second admin
    """
    user = await service.register(
        name=body.name,
        user_id=body.id,
        password=body.password,
        role=body.role,
    )
    users_registered_total.labels(service=settings.SERVICE_NAME, role=user.role.value).inc()
    return {"message": "注册成功", "user": user.to_wire()}


@router.post("/login")
async def login(body: LoginRequest, service: IdentityService = Depends(get_identity_service)):
    """Check credentials and return the matching user.

    Raises:
        ValidationError: 400 on missing fields or role mismatch
        AuthError: 401 when no account matches
    """
    user = await service.login(
        name=body.name,
        user_id=body.id,
        password=body.password,
        role=body.role,
    )
    logins_total.labels(service=settings.SERVICE_NAME, role=user.role.value).inc()
    return {"message": "登录成功", "user": user.to_wire()}
