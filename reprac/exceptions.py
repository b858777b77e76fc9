"""reprac exception classes."""


class RepracError(Exception):
    """Base exception for all reprac errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(RepracError):
    """Raised when the config file cannot be used."""

    def __init__(self, message: str, code: str = "CONFIGURATION_ERROR") -> None:
        super().__init__(code, message)


class ConfigMissingError(ConfigurationError):
    """Raised when the config file does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIG_MISSING")


class ConfigParseError(ConfigurationError):
    """Raised when the config file is not valid YAML or has the wrong shape."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIG_PARSE")


class ConfigPersistError(ConfigurationError):
    """Raised when the config file cannot be written."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIG_PERSIST")


class TransportError(RepracError):
    """Raised on connection failures and timeouts."""

    pass


class HTTPStatusError(RepracError):
    """Raised when the API answers with a status >= 400."""

    def __init__(self, code: str, message: str, status_code: int) -> None:
        super().__init__(code, message)
        self.status_code = status_code


class NotFoundError(HTTPStatusError):
    """Raised when a resource is not found."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__("NOT_FOUND", message, 404)


class AuthenticationError(HTTPStatusError):
    """Raised when the token is missing, invalid or lacks access."""

    pass


class RateLimitedError(HTTPStatusError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        retry_after: int,
    ) -> None:
        super().__init__(code, message, status_code)
        self.retry_after = retry_after


class ServerError(HTTPStatusError):
    """Raised on server errors (5xx)."""

    pass


class DecodeError(RepracError):
    """Raised when a response body is not the JSON we expect."""

    def __init__(self, message: str) -> None:
        super().__init__("DECODE_ERROR", message)


class ValidationError(RepracError):
    """Raised on invalid user input."""

    def __init__(self, message: str) -> None:
        super().__init__("VALIDATION_ERROR", message)


class DuplicateRepositoryError(RepracError):
    """Raised when adding a repository that is already tracked."""

    def __init__(self, key: str) -> None:
        super().__init__("DUPLICATE_REPOSITORY", f"Repo {key} already tracked")
        self.key = key
