class AppException(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AuthenticationException(AppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status_code=401)


class NotFoundException(AppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status_code=404)


class UpstreamException(AppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status_code=502)


class ConfigurationException(AppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status_code=500)


class NoProvidersConfiguredError(ConfigurationException):
    def __init__(self, message: str):
        super().__init__("NO_PROVIDERS_CONFIGURED", message)
