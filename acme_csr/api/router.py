"""Main API router"""

from fastapi import APIRouter

from .routes import (
    admin,
    auth,
    campaigns,
    categories,
    currencies,
    donations,
    exports,
    imports,
    notifications,
    organizations,
    search,
    teams,
    users,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
api_router.include_router(donations.router, prefix="/donations", tags=["donations"])
api_router.include_router(organizations.router, prefix="/organizations", tags=["organizations"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(currencies.router, prefix="/currencies", tags=["currencies"])
api_router.include_router(teams.router, prefix="/teams", tags=["teams"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(exports.router, prefix="/exports", tags=["exports"])
api_router.include_router(imports.router, prefix="/imports", tags=["imports"])
api_router.include_router(search.router, prefix="/search", tags=["search"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
