"""Domain errors raised by the service layer.

Each error knows the HTTP status it maps to; create_app() registers a
single JSON handler for CRMError so blueprints never translate them by
hand. CRMError subclasses ValueError, so callers that only care about
"bad input" can keep catching ValueError.
"""


class CRMError(ValueError):
    """Base class for all service-layer errors."""

    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(CRMError):
    """Malformed or missing input. Raised before any write begins."""

    status_code = 400


class NotFoundError(CRMError):
    """A referenced entity id does not exist."""

    status_code = 404


class ConflictError(CRMError):
    """Uniqueness violation, e.g. a duplicate active referrer name."""

    status_code = 409


class TransactionFailure(CRMError):
    """A multi-step write aborted partway and was rolled back."""

    status_code = 500


class IntegrationFailure(CRMError):
    """Email or AI provider unreachable, erroring, or not configured."""

    status_code = 502

    def __init__(self, message, details=None, configured=True):
        super().__init__(message, details)
        self.configured = configured
        if not configured:
            self.status_code = 503
