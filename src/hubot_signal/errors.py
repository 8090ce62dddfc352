"""Adapter error types.

Everything here is delivered through the adapter's "error" event channel
rather than raised into the robot, except ConfigurationError which is raised
at startup.
"""

from __future__ import annotations


class SignalAdapterError(RuntimeError):
    """Base adapter error."""


class ConfigurationError(SignalAdapterError):
    """Required environment configuration is missing or invalid."""


class MissingRoomError(SignalAdapterError):
    """Outbound envelope has no room to deliver to."""

    def __init__(self) -> None:
        super().__init__(
            "Cannot send a message without a valid room. "
            "Envelopes should contain a room property set to a phone number or group id."
        )


class MissingSignalingKeyError(SignalAdapterError):
    """No signaling key is stored, so inbound traffic cannot be decrypted."""

    def __init__(self) -> None:
        super().__init__(
            "No signaling key is defined, perhaps we didn't successfully register?"
        )


class NotConnectedError(SignalAdapterError):
    """Send attempted before the message sender was created."""


class ProvisioningError(SignalAdapterError):
    """Account provisioning step failed."""


class VerificationRequestError(ProvisioningError):
    """Requesting an SMS verification code failed."""


class RegistrationError(ProvisioningError):
    """Registering the account with the verification code failed."""


class ConnectionSetupError(ProvisioningError):
    """Building the message sender or receiver, or starting the listener, failed."""


class InvalidInboundEventError(SignalAdapterError):
    """Inbound event from the receiver does not have the expected shape."""
