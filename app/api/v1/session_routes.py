import logging

from fastapi import APIRouter

from app.constants.auth_errors import AUTH_ERROR_MESSAGES, AuthErrorCode
from app.core.dependencies import OAuthServiceDep, SessionDep, SettingsDep
from app.core.exceptions import AuthenticationException
from app.schemas.auth import (
    CurrentUserResponse,
    ProviderListResponse,
    ProviderResponse,
)
from app.schemas.common import ApiResponse, create_success_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Session"])


@router.get(
    "/providers",
    response_model=ApiResponse[ProviderListResponse],
    summary="List configured providers",
)
async def list_providers(
    oauth_service: OAuthServiceDep, settings: SettingsDep
) -> ApiResponse[ProviderListResponse]:
    providers = [
        ProviderResponse(
            slug=entry.provider_slug,
            display_name=entry.strategy.display_name,
            login_url=f"{settings.base_url}/auth/{entry.provider_slug}",
            callback_url=entry.config.redirect_uri,
        )
        for entry in oauth_service.registry.entries()
    ]
    return create_success_response(ProviderListResponse(providers=providers))


@router.get(
    "/me",
    response_model=ApiResponse[CurrentUserResponse],
    summary="Get the signed-in user",
)
async def get_current_user(
    oauth_service: OAuthServiceDep, session: SessionDep
) -> ApiResponse[CurrentUserResponse]:
    user = oauth_service.current_user(session)
    if user is None:
        raise AuthenticationException(
            code=AuthErrorCode.NOT_AUTHENTICATED.value,
            message=AUTH_ERROR_MESSAGES[AuthErrorCode.NOT_AUTHENTICATED],
        )
    return create_success_response(
        CurrentUserResponse.model_validate(user.model_dump(exclude={"raw"}))
    )
