"""
Host-facing plugin surface: command registration and trigger intake.

``DictatePlugin.handle()`` returns a ``CommandResult`` telling the host
whether the event was consumed. Hosts whose "before command" hook has no
way to stop propagation call ``before_command()`` instead, which raises
``CommandHandled`` after a handled trigger. That exception is a control-flow
marker for the adapter, not an error.
"""

import logging

from handy_dictate.core.config import get_settings
from handy_dictate.core.models import CommandResult, CommandSpec
from handy_dictate.services.dictation import DictationController
from handy_dictate.services.handy.client import HandyClient
from handy_dictate.services.host import BaseHost, create_host

logger = logging.getLogger(__name__)

COMMAND_NAME = "dictate"
COMMAND_SPEC = CommandSpec(
    template="/dictate",
    description="Speech-to-text: start/stop recording via Handy",
)


class CommandHandled(Exception):
    """Raised by ``before_command`` to stop the host from running the command."""

    def __init__(self, command: str = COMMAND_NAME) -> None:
        self.command = command
        super().__init__(f"__{command.upper()}_HANDLED__")


def register_command(config: dict) -> dict:
    """Add the ``dictate`` entry to a host command table, keeping other entries."""
    commands = config.get("command")
    if commands is None:
        commands = config["command"] = {}
    commands[COMMAND_NAME] = COMMAND_SPEC.model_dump()
    return config


class DictatePlugin:
    """Binds one ``DictationController`` to the host's command events.

    Args:
        host: Host adapter (built from settings if omitted).
        client: Handy API client (built from settings if omitted).
        controller: Pre-built controller, mainly for tests.
    """

    def __init__(
        self,
        host: BaseHost | None = None,
        client: HandyClient | None = None,
        controller: DictationController | None = None,
    ) -> None:
        if controller is None:
            host = host or create_host(get_settings().host_provider)
            controller = DictationController(client or HandyClient(), host)
        self.controller = controller

    @property
    def recording(self) -> bool:
        return self.controller.recording

    def config(self, config: dict) -> dict:
        return register_command(config)

    async def handle(self, command: str) -> CommandResult:
        """Run the toggle for ``dictate``; leave every other command alone."""
        if command.lstrip("/") != COMMAND_NAME:
            return CommandResult.pass_through
        logger.debug("Handling /%s trigger (recording=%s)", COMMAND_NAME, self.recording)
        await self.controller.toggle()
        return CommandResult.handled

    async def before_command(self, command: str) -> None:
        """Sentinel-style hook for hosts without a handled/pass-through result.

        Raises:
            CommandHandled: After the trigger has been fully handled.
        """
        if await self.handle(command) is CommandResult.handled:
            raise CommandHandled(COMMAND_NAME)
