"""Structured error hierarchy for configuration failures.

Illegal transitions, unknown listeners and repeated lifecycle calls are not
errors; they are reported through return values. Only misconfiguration raises.
"""

from __future__ import annotations


class CouchookError(Exception):
    def __init__(self, code: str, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.cause = cause


class ConfigurationError(CouchookError):
    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__("CONFIGURATION_ERROR", message, cause)


class RouteResolutionError(CouchookError):
    def __init__(self, path: str, segment: str, cause: Exception | None = None) -> None:
        super().__init__(
            "ROUTE_UNRESOLVED", f'Cannot resolve "{segment}" of event route "{path}"', cause
        )
        self.path = path
        self.segment = segment


class InvalidRunnerError(CouchookError):
    def __init__(self, child: object) -> None:
        super().__init__("INVALID_RUNNER", f"{type(child).__name__} is not a runner")
        self.child = child


class FactoryItemError(CouchookError):
    def __init__(self, item: object) -> None:
        super().__init__(
            "FACTORY_ITEM_MISSING",
            f"{type(item).__name__} does not implement can_handle/create",
        )
        self.item = item


class ResourceError(CouchookError):
    def __init__(self, message: str, resource_id: str | None = None) -> None:
        super().__init__("RESOURCE_ERROR", message)
        self.resource_id = resource_id
