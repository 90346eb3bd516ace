"""
Notification error taxonomy.

Only ``ResolutionFailure`` ever reaches a caller of the fan-out service;
delivery errors are raised by channels and converted to outcomes by the
dispatcher.
"""


class NotificationError(Exception):
    """Base exception for the notification engine."""
    pass


class ConfigError(NotificationError):
    """Raised when a channel is enabled but not configured."""
    pass


class ResolutionFailure(NotificationError):
    """The recipient set for a trigger could not be obtained."""

    def __init__(self, context_kind: str, cause: BaseException):
        self.context_kind = context_kind
        self.cause = cause
        super().__init__(f"Failed to resolve recipients for {context_kind}: {cause}")


class DeliveryFailed(NotificationError):
    """One recipient could not be reached on one channel."""

    channel = "unknown"

    def __init__(self, recipient_id: str, cause):
        self.recipient_id = recipient_id
        self.cause = cause
        super().__init__(f"{self.channel} delivery to {recipient_id} failed: {cause}")


class PushDeliveryFailed(DeliveryFailed):
    channel = "push"


class InAppPersistFailed(DeliveryFailed):
    channel = "in_app"
