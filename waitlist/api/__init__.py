"""API routers."""

from fastapi import APIRouter

from waitlist.api import signup

api_router = APIRouter()

api_router.include_router(signup.router, tags=["waitlist"])
