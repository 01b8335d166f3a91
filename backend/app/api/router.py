from fastapi import APIRouter

from app.api.routes import admin, auth, favorites, profile, prompts, submissions, uploads, users

api_router = APIRouter()
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(uploads.router, tags=["uploads"])
api_router.include_router(profile.router, tags=["profile"])
api_router.include_router(prompts.router, tags=["prompts"])
api_router.include_router(submissions.router, tags=["submissions"])
api_router.include_router(favorites.router, tags=["favorites"])
api_router.include_router(users.router, tags=["users"])
api_router.include_router(admin.router, tags=["admin"])
