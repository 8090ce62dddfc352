"""Signal adapter for the robot.

The robot loads the adapter through `use()`, then calls `run()`. Provisioning
starts once the brain has loaded (secrets live in the brain), and every
asynchronous failure is reported on the adapter's "error" event.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Coroutine, Sequence
from typing import Any, Callable

from hubot_signal.events import EventEmitter
from hubot_signal.host import Envelope, Robot
from hubot_signal.infra.credential_store import BrainCredentialStore, CredentialStore
from hubot_signal.infra.settings import SignalSettings, load_settings
from hubot_signal.infra.transport import MessageReceiver, MessageSender, SignalService
from hubot_signal.messaging.inbound import MessageRouter
from hubot_signal.messaging.outbound import OutboundDispatcher
from hubot_signal.observability.logging import get_logger
from hubot_signal.observability.redaction import safe_log_context
from hubot_signal.provisioning.account import EXIT_FAILURE, AccountProvisioner

logger = get_logger(__name__)


class SignalAdapter(EventEmitter):
    """Connects a robot to one Signal account.

    Events:
        "connected": emitted by run() right away, before provisioning has
            finished. It only means the adapter has started.
        "error": emitted with the exception for every asynchronous failure.
    """

    def __init__(
        self,
        robot: Robot,
        service: SignalService,
        settings: SignalSettings | None = None,
        store: CredentialStore | None = None,
        exit_process: Callable[[int], Any] = sys.exit,
    ) -> None:
        super().__init__()
        self.robot = robot
        self.settings = settings or load_settings()
        self.store = store or BrainCredentialStore(robot.brain)
        self._exit = exit_process

        self.router = MessageRouter(robot, self._report)
        self.dispatcher = OutboundDispatcher(self.store, self._report)
        self.provisioner = AccountProvisioner(
            robot,
            self.settings,
            service,
            self.store,
            on_connected=self._on_connected,
        )

        self.provisioned = False
        self._inbound_task: asyncio.Task | None = None
        self._background_tasks: set[asyncio.Task] = set()

    # ---- Robot-facing surface ----

    def run(self) -> None:
        logger.debug("loading signal adapter")
        # Secrets are kept in the brain, so wait for it to load.
        self.robot.brain.on("loaded", self._on_brain_loaded)
        self.emit("connected")

    def send(self, envelope: Envelope, *strings: str) -> None:
        self._spawn(self.dispatcher.dispatch(envelope, [], *strings))

    def reply(self, envelope: Envelope, *strings: str) -> None:
        self._spawn(self.dispatcher.dispatch(envelope, [], *strings))

    def send_attachments(
        self, envelope: Envelope, attachments: Sequence[Any], *strings: str
    ) -> None:
        self._spawn(self.dispatcher.dispatch(envelope, attachments, *strings))

    def reply_attachments(
        self, envelope: Envelope, attachments: Sequence[Any], *strings: str
    ) -> None:
        self._spawn(self.dispatcher.dispatch(envelope, attachments, *strings))

    async def close(self) -> None:
        """Stop consuming inbound events and wait for in-flight sends."""
        if self._inbound_task is not None:
            self._inbound_task.cancel()
            await asyncio.gather(self._inbound_task, return_exceptions=True)
            self._inbound_task = None
        if self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    # ---- Internal ----

    def _on_brain_loaded(self, *_args: Any) -> None:
        # "loaded" may fire again on later brain syncs.
        if self.provisioned:
            return
        self.provisioned = True
        logger.debug("brain loaded, running adapter")
        self._spawn(self._provision())

    async def _provision(self) -> None:
        try:
            result = await self.provisioner.provision()
        except Exception as exc:
            # e.g. the credential store failing; still fatal.
            self._report(exc)
            self._exit(EXIT_FAILURE)
            return
        if result.error is not None:
            self._report(result.error)
        if result.exit_code is not None:
            logger.info(
                "provisioning finished, exiting",
                extra={
                    "extra_fields": {
                        "state": result.state.value,
                        "exit_code": result.exit_code,
                    }
                },
            )
            self._exit(result.exit_code)

    def _on_connected(self, sender: MessageSender, receiver: MessageReceiver) -> None:
        self.dispatcher.bind(sender)
        self._inbound_task = asyncio.get_running_loop().create_task(
            self.router.consume(receiver)
        )

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    def _report(self, error: BaseException) -> None:
        logger.error(
            "adapter error",
            extra={
                "extra_fields": safe_log_context(
                    error_type=type(error).__name__, error=str(error)
                )
            },
        )
        self.emit("error", error)


def use(robot: Robot, service: SignalService) -> SignalAdapter:
    """Adapter entry point called by the robot at load time."""
    return SignalAdapter(robot, service)
