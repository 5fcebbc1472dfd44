"""
Custom Exceptions.

Exception hierarchy shared by the SDK, CLI and TUI. Every error carries a
human readable message and a stable code. Query errors derive from ApiError
and keep the HTTP status and URI of the failing request when there is one.
"""

import json
from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


# =============================================================================
# Configuration and authentication
# =============================================================================


class ConfigError(ApplicationError):
    """Raised when configuration is missing or invalid."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="CFG_INVALID")


class CloudNotFoundError(ConfigError):
    """Raised when a named cloud is not present in clouds.yaml."""

    def __init__(self, cloud: str) -> None:
        self.cloud = cloud
        super().__init__(f"Cloud `{cloud}` not found in the configuration")
        self.code = "CFG_CLOUD_NOT_FOUND"


class AuthError(ApplicationError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, code="AUTH_FAILED")


class AuthMissingDataError(AuthError):
    """Raised when the cloud config lacks an attribute the auth method needs."""

    def __init__(self, attribute: str) -> None:
        self.attribute = attribute
        super().__init__(f"Auth data is missing ({attribute})")
        self.code = "AUTH_MISSING_DATA"


# =============================================================================
# API errors
# =============================================================================


class ApiError(ApplicationError):
    """Base exception for errors raised while querying a service."""

    def __init__(self, message: str, code: str = "API_ERROR") -> None:
        super().__init__(message, code=code)

    @classmethod
    def from_response(cls, uri: str, status: int, body: bytes) -> "ApiError":
        """
        Build the error for a failed response.

        Args:
            uri: Requested URI
            status: HTTP status code
            body: Raw response body

        Returns:
            ResourceNotFoundError for 404, OpenStackError when the JSON body
            carries a `message` or `error` string, OpenStackUnrecognizedError
            for any other JSON body and OpenStackServiceError otherwise.
        """
        try:
            value = json.loads(body) if body else None
        except ValueError:
            value = None

        if value is None:
            if status == 404:
                return ResourceNotFoundError(uri=uri, msg="")
            return OpenStackServiceError(status, uri, body.decode("utf-8", "replace"))

        if status == 404:
            return ResourceNotFoundError(uri=uri, msg=json.dumps(value))

        error_value = None
        if isinstance(value, dict):
            error_value = value.get("message", value.get("error"))
            if error_value is None:
                # Nova and Cinder wrap the fault: {"itemNotFound": {"message": ...}}
                nested = [v for v in value.values() if isinstance(v, dict)]
                if len(value) == 1 and nested:
                    error_value = nested[0].get("message")

        if isinstance(error_value, str):
            return OpenStackError(status, uri, error_value)
        return OpenStackUnrecognizedError(
            status, uri, error_value if error_value is not None else value,
        )


class ClientError(ApiError):
    """Raised when the HTTP transport fails (connection, TLS, timeout)."""

    def __init__(self, message: str) -> None:
        super().__init__(f"HTTP client error: {message}", code="API_CLIENT")


class UrlBuildError(ApiError):
    """Raised when a request URL cannot be built."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Failed to build request URL: {message}", code="API_URL")


class BodyError(ApiError):
    """Raised when a request body cannot be serialized."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Failed to build request body: {message}", code="API_BODY")


class OpenStackError(ApiError):
    """Raised when a service responds with an error message."""

    def __init__(self, status: int, uri: str, msg: str, code: str = "API_OPENSTACK") -> None:
        self.status = status
        self.uri = uri
        self.msg = msg
        super().__init__(
            f"OpenStack API error: {status}: {msg}" if msg else f"OpenStack API error: {status}",
            code=code,
        )


class ResourceNotFoundError(OpenStackError):
    """Raised when a resource does not exist."""

    def __init__(self, uri: str = "", msg: str = "") -> None:
        super().__init__(404, uri, msg, code="API_NOT_FOUND")
        if not uri and not msg:
            self.message = "Resource not found"
            self.args = (self.message,)


class IdNotUniqueError(ApiError):
    """Raised when a name lookup matches more than one resource."""

    def __init__(self, message: str = "Request returned multiple entries") -> None:
        super().__init__(message, code="API_ID_NOT_UNIQUE")


class OpenStackServiceError(ApiError):
    """Raised when a service responds with an error that is not JSON."""

    def __init__(self, status: int, uri: str, data: str) -> None:
        self.status = status
        self.uri = uri
        self.data = data
        super().__init__(f"OpenStack service error: {status}: {data}", code="API_SERVICE")


class OpenStackUnrecognizedError(ApiError):
    """Raised when a service error body has an unexpected shape."""

    def __init__(self, status: int, uri: str, obj: Any) -> None:
        self.status = status
        self.uri = uri
        self.obj = obj
        super().__init__(
            f"OpenStack API returned unrecognized error: {status}: {json.dumps(obj)}",
            code="API_UNRECOGNIZED",
        )


class DataTypeError(ApiError):
    """Raised when a response does not match the expected record type."""

    def __init__(self, type_name: str, source: Exception) -> None:
        self.type_name = type_name
        self.source = source
        super().__init__(
            f"Failed to parse response as {type_name}: {source}", code="API_DATA_TYPE",
        )


class PaginationError(ApiError):
    """Raised when pagination information in a response is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Pagination error: {message}", code="API_PAGINATION")


class CatalogError(ApiError):
    """Raised when no usable endpoint exists for a service."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="API_CATALOG")


class DiscoveryError(ApiError):
    """Raised when endpoint version discovery fails."""

    def __init__(self, service: str, url: str, msg: str) -> None:
        self.service = service
        self.url = url
        super().__init__(
            f"Discovery error for `{service}` at {url}: {msg}", code="API_DISCOVERY",
        )
