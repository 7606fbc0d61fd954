"""HTTP routes. /users and /roles sit behind the authentication dependency."""

from fastapi import APIRouter, Depends

from gatekeeper.api import auth, health, roles, users
from gatekeeper.api.deps import get_current_claims

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(
    users.router,
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(get_current_claims)],
)
router.include_router(
    roles.router,
    prefix="/roles",
    tags=["roles"],
    dependencies=[Depends(get_current_claims)],
)
