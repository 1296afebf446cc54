"""AlertError hierarchy — base exception class for all SolSignal errors."""

from __future__ import annotations


class AlertError(Exception):
    """Base error for all alert pipeline operations.

    Attributes:
        message: Human-readable error description.
        status_code: Suggested HTTP status code.
        code: Machine-readable error code string.
    """

    default_status_code = 500
    default_code = "alert-error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status_code
        self.code = code if code is not None else self.default_code


class MalformedRequest(AlertError):
    """Ingress body is missing required fields; the whole batch is rejected."""

    default_status_code = 400
    default_code = "malformed-request"


class MalformedEvent(MalformedRequest):
    """An activity event carries no affected address."""

    default_code = "malformed-event"


class Unauthorized(AlertError):
    """Shared-secret mismatch at the ingress boundary."""

    default_status_code = 401
    default_code = "unauthorized"


class ConfigurationError(AlertError):
    """A required secret or key is absent at invocation start."""

    default_code = "configuration-error"


class DeliveryFailure(AlertError):
    """One recipient's notification could not be sent.

    Absorbed by the dispatcher and recorded as a failed delivery.
    """

    default_status_code = 502
    default_code = "delivery-failure"


class RegistryLinkFailure(AlertError):
    """The activity-feed registry rejected an add/remove call."""

    default_status_code = 502
    default_code = "registry-link-failure"
