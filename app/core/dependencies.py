from typing import Annotated

from fastapi import Depends, Request

from app.core.settings import Settings
from app.oauth.service import OAuthService
from app.sessions.manager import SessionManager
from app.sessions.store import SessionRecord


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_oauth_service(request: Request) -> OAuthService:
    return request.app.state.oauth_service


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_session(
    request: Request,
    session_manager: SessionManager = Depends(get_session_manager),
) -> SessionRecord:
    return session_manager.load(request)


SettingsDep = Annotated[Settings, Depends(get_settings)]
OAuthServiceDep = Annotated[OAuthService, Depends(get_oauth_service)]
SessionManagerDep = Annotated[SessionManager, Depends(get_session_manager)]
SessionDep = Annotated[SessionRecord, Depends(get_session)]
