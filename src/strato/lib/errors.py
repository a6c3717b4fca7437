from strato.exceptions import StratoError


class UsageError(StratoError):
    pass


class ConfigError(StratoError):
    pass


class NotAuthenticatedError(StratoError):
    def __init__(self, *args, **kwargs):
        msg = (
            "No existing credentials found. "
            "Please run `strato login` or pass `--token`"
        )
        super().__init__(msg, *args, **kwargs)


class APIError(StratoError):
    """Raised for any non-2xx response from the Strato API."""

    def __init__(
        self,
        message: str,
        status: int,
        code: str | None = None,
        **kwargs,
    ) -> None:
        super().__init__(message, **kwargs)
        self.status = status
        self.code = code


class NotFoundError(APIError):
    pass


class ScopeNotFoundError(StratoError):
    def __init__(self, scope: str, *args, **kwargs):
        msg = f"The specified scope does not exist: '{scope}'"
        super().__init__(msg, *args, **kwargs)


class MissingOrgError(StratoError):
    def __init__(self, *args, **kwargs):
        super().__init__('"org" is not defined', *args, **kwargs)
