from fastapi import APIRouter

from app.api.v1.session_routes import router as session_router

api_v1_router = APIRouter(prefix="/api/v1")

api_v1_router.include_router(session_router)
