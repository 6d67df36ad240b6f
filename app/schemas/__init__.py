from app.schemas.auth import (
    CurrentUserResponse,
    ProviderListResponse,
    ProviderResponse,
)
from app.schemas.common import (
    ApiResponse,
    ErrorResponse,
    MetaResponse,
    create_error_response,
    create_success_response,
)

__all__ = [
    "CurrentUserResponse",
    "ProviderListResponse",
    "ProviderResponse",
    "ApiResponse",
    "ErrorResponse",
    "MetaResponse",
    "create_error_response",
    "create_success_response",
]
