from fastapi import APIRouter

from src.teamspace.api.v1 import admin_requests, auth, businesses, invitations, users

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(businesses.router)
api_router.include_router(invitations.router)
api_router.include_router(admin_requests.router)
