"""Account provisioning: request a code, register, then connect.

States:
    UNREGISTERED -> AWAITING_CODE     no profile key and no code: ask for an SMS code
    UNREGISTERED -> REGISTERED        no profile key but a code: register with it
    REGISTERED / UNREGISTERED -> CONNECTED
                                      profile key present (or just registered):
                                      build sender and receiver
    any -> FAILED                     code request, registration or connect failed

AWAITING_CODE, CONNECTED and FAILED are terminal. Nothing here retries; the
operator restarts the process.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable

from hubot_signal.errors import (
    ConnectionSetupError,
    MissingSignalingKeyError,
    RegistrationError,
    SignalAdapterError,
    VerificationRequestError,
)
from hubot_signal.host import Robot
from hubot_signal.infra.credential_store import (
    PROFILE_KEY,
    SIGNALING_KEY,
    CredentialStore,
)
from hubot_signal.infra.settings import CODE_ENV_VAR, SignalSettings
from hubot_signal.infra.transport import MessageReceiver, MessageSender, SignalService
from hubot_signal.messaging.response import SignalResponse
from hubot_signal.observability.logging import get_logger
from hubot_signal.observability.redaction import safe_log_context

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class ProvisionState(str, enum.Enum):
    UNREGISTERED = "unregistered"
    AWAITING_CODE = "awaiting_code"
    REGISTERED = "registered"
    CONNECTED = "connected"
    FAILED = "failed"


@dataclass(frozen=True)
class ProvisionResult:
    """Outcome of one provisioning run.

    Attributes:
        state: Terminal state reached.
        exit_code: Process exit status to terminate with, or None to keep running.
        error: Failure to report on the adapter error channel, if any.
    """

    state: ProvisionState
    exit_code: int | None = None
    error: SignalAdapterError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


ConnectedCallback = Callable[[MessageSender, MessageReceiver], None]


def signaling_key_bytes(signaling_key: str | bytes) -> bytes:
    """Stored signaling keys are binary strings; the receiver wants raw bytes."""
    if isinstance(signaling_key, bytes):
        return signaling_key
    return signaling_key.encode("latin-1")


class AccountProvisioner:
    """Brings the configured Signal account from unregistered to connected."""

    def __init__(
        self,
        robot: Robot,
        settings: SignalSettings,
        service: SignalService,
        store: CredentialStore,
        on_connected: ConnectedCallback,
    ) -> None:
        self.robot = robot
        self.settings = settings
        self.service = service
        self.store = store
        self._on_connected = on_connected
        self.account_manager = service.account_manager(
            settings.number, settings.password, store
        )
        self.state = ProvisionState.UNREGISTERED

    def _transition(self, state: ProvisionState) -> None:
        logger.debug(
            "provisioning state changed",
            extra={"extra_fields": {"from": self.state.value, "to": state.value}},
        )
        self.state = state

    def _fail(self, error: SignalAdapterError) -> ProvisionResult:
        self._transition(ProvisionState.FAILED)
        return ProvisionResult(ProvisionState.FAILED, exit_code=EXIT_FAILURE, error=error)

    async def provision(self) -> ProvisionResult:
        """Run the state machine to a terminal state."""
        if not self.store.get(PROFILE_KEY):
            if not self.settings.verification_code:
                return await self.request_code()
            failure = await self.register()
            if failure is not None:
                return failure
        return self.connect()

    async def request_code(self) -> ProvisionResult:
        """Ask the service to send an SMS verification code to the account number."""
        logger.info("requesting verification code")
        try:
            await self.account_manager.request_sms_verification(self.settings.number)
        except Exception as exc:
            logger.error(
                "verification code request failed",
                extra={"extra_fields": {"error_type": type(exc).__name__}},
            )
            error = VerificationRequestError(f"verification code request failed: {exc}")
            error.__cause__ = exc
            return self._fail(error)

        self._transition(ProvisionState.AWAITING_CODE)
        logger.info(
            "verification code sent; once you receive it, start the bot again "
            f"with the code in the {CODE_ENV_VAR} environment variable"
        )
        return ProvisionResult(ProvisionState.AWAITING_CODE, exit_code=EXIT_OK)

    async def register(self) -> ProvisionResult | None:
        """Register the account with the configured code.

        Returns:
            None on success, a FAILED result otherwise.
        """
        logger.info("registering account")
        try:
            result = await self.account_manager.register_single_device(
                self.settings.number, self.settings.verification_code
            )
        except Exception as exc:
            logger.error(
                "account registration failed",
                extra={"extra_fields": {"error_type": type(exc).__name__}},
            )
            error = RegistrationError(f"account registration failed: {exc}")
            error.__cause__ = exc
            return self._fail(error)

        self._transition(ProvisionState.REGISTERED)
        logger.info(
            "account registered",
            extra={"extra_fields": safe_log_context(result=result)},
        )
        return None

    def connect(self) -> ProvisionResult:
        """Build sender and receiver and hand them to the adapter."""
        logger.debug("connecting to service")
        signaling_key = self.store.get(SIGNALING_KEY)
        if not signaling_key:
            logger.error("no signaling key stored")
            return self._fail(MissingSignalingKeyError())

        try:
            sender = self.service.message_sender(
                self.settings.number, self.settings.password, self.store
            )
            receiver = self.service.message_receiver(
                self.settings.device_address,
                self.settings.password,
                signaling_key_bytes(signaling_key),
                self.store,
            )
            self._on_connected(sender, receiver)
        except Exception as exc:
            logger.error(
                "connection setup failed",
                extra={"extra_fields": {"error_type": type(exc).__name__}},
            )
            error = ConnectionSetupError(f"connection setup failed: {exc}")
            error.__cause__ = exc
            return self._fail(error)

        self.robot.response_class = SignalResponse
        self._transition(ProvisionState.CONNECTED)
        logger.info("connected to service")
        return ProvisionResult(ProvisionState.CONNECTED)
