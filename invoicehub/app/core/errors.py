"""Domain errors raised by services and translated to HTTP responses by the app."""

from typing import Any, Iterable


class InvoiceHubError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def detail(self) -> Any:
        return self.message


class NotFoundError(InvoiceHubError):
    """Record is missing or owned by another user; both cases look the same."""

    status_code = 404

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


class InvalidStateError(InvoiceHubError):
    status_code = 400


class InvalidTransitionError(InvoiceHubError):
    status_code = 400

    def __init__(self, current: str, requested: str, allowed: Iterable[str]):
        self.current = current
        self.requested = requested
        self.allowed = list(allowed)
        super().__init__(f"Cannot change invoice status from {current} to {requested}")

    @property
    def detail(self) -> Any:
        return {
            "message": self.message,
            "current_status": self.current,
            "requested_status": self.requested,
            "allowed_statuses": self.allowed,
        }


class DependentRecordExistsError(InvoiceHubError):
    status_code = 400


class UpstreamFailureError(InvoiceHubError):
    status_code = 502
