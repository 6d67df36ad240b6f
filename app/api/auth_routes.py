import logging

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse, RedirectResponse

from app.constants.auth_errors import AUTH_ERROR_MESSAGES, AuthErrorCode
from app.core.dependencies import OAuthServiceDep, SessionDep, SessionManagerDep
from app.core.exceptions import NotFoundException
from app.oauth.registry import RegistryEntry
from app.oauth.service import OAuthService
from app.web.pages import render_error_page, render_home_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


def _require_entry(oauth_service: OAuthService, provider: str) -> RegistryEntry:
    entry = oauth_service.get_entry(provider)
    if entry is None:
        raise NotFoundException(
            code=AuthErrorCode.PROVIDER_NOT_FOUND.value,
            message=AUTH_ERROR_MESSAGES[AuthErrorCode.PROVIDER_NOT_FOUND],
        )
    return entry


@router.get("/", response_class=HTMLResponse, summary="Home")
async def home(oauth_service: OAuthServiceDep, session: SessionDep) -> HTMLResponse:
    user = oauth_service.current_user(session)
    return render_home_page(oauth_service.registry, user)


@router.get("/auth/{provider}", summary="Start OAuth sign-in")
async def begin_oauth(
    provider: str,
    oauth_service: OAuthServiceDep,
    session_manager: SessionManagerDep,
    session: SessionDep,
) -> RedirectResponse:
    entry = _require_entry(oauth_service, provider)
    authorization_url = oauth_service.begin_authorization(entry, session)
    response = RedirectResponse(url=authorization_url, status_code=303)
    session_manager.commit(response, session)
    return response


@router.get("/auth/{provider}/callback", response_model=None, summary="OAuth callback")
async def oauth_callback(
    provider: str,
    oauth_service: OAuthServiceDep,
    session_manager: SessionManagerDep,
    session: SessionDep,
    code: str | None = Query(None, description="Authorization code from the provider"),
    state: str | None = Query(None, description="State parameter for CSRF validation"),
    error: str | None = Query(None),
    error_description: str | None = Query(None),
) -> HTMLResponse | RedirectResponse:
    entry = _require_entry(oauth_service, provider)

    if error:
        logger.warning(
            "Provider %s returned error %s: %s", provider, error, error_description
        )
        return render_error_page(
            AuthErrorCode.PROVIDER_DENIED.value,
            error_description or AUTH_ERROR_MESSAGES[AuthErrorCode.PROVIDER_DENIED],
        )

    if not code or not state:
        return render_error_page(
            AuthErrorCode.MISSING_CALLBACK_PARAMS.value,
            AUTH_ERROR_MESSAGES[AuthErrorCode.MISSING_CALLBACK_PARAMS],
        )

    result = await oauth_service.complete_authorization(entry, session, code, state)
    if not result.success:
        status_code = 400 if result.error_code == AuthErrorCode.INVALID_OAUTH_STATE else 502
        response = render_error_page(
            result.error_code.value, result.error_message, status_code
        )
        # Pending state is single use, even on failure.
        session_manager.commit(response, session)
        return response

    session = session_manager.renew(session)
    oauth_service.sign_in(session, result.data)
    response = RedirectResponse(url="/", status_code=303)
    session_manager.commit(response, session)
    return response


@router.api_route("/logout", methods=["GET", "POST"], summary="Sign out")
async def logout(
    session_manager: SessionManagerDep, session: SessionDep
) -> RedirectResponse:
    response = RedirectResponse(url="/", status_code=303)
    session_manager.destroy(response, session)
    return response
