"""Exceptions raised while forwarding SCC findings to PagerDuty."""


class NotifierError(Exception):
    """Base class for notifier failures."""


class InvalidPayload(NotifierError):
    """The Pub/Sub message is missing data the notifier needs."""


class PayloadDecodeError(InvalidPayload):
    """The message data is not valid base64-encoded UTF-8 JSON."""


class DeliveryFailed(NotifierError):
    """The PagerDuty Events API did not accept the event."""


class SecretAccessError(NotifierError):
    """A credential could not be read from Secret Manager."""
