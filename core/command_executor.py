# file: core/command_executor.py

import logging
from typing import Any, Optional

from core.service_locator import ServiceLocator
from core.event_dispatcher import EventDispatcher
from core.commands.base_command import BaseCommand
from core.commands.command_log import CommandLog
from utils.config_loader import ConfigLoader

COMMANDS_CONFIG = "commands_config.json"


class CommandExecutor:
    """
    Implements the Command Pattern's "Invoker".
    It accepts Command objects, runs them through a CommandLog and announces
    each step on the event bus:

        COMMAND_EVENT.EXECUTED   command, description
        COMMAND_EVENT.FAILED     command, error
        COMMAND_EVENT.UNDONE     command, description
    """
    def __init__(self, locator: ServiceLocator):
        self.locator = locator
        self.events: EventDispatcher = self.locator.resolve("event_dispatcher")
        self.config: ConfigLoader = self.locator.resolve("config_loader")
        self.logger = logging.getLogger(self.__class__.__name__)

        cmd_config = self.config.get_config(COMMANDS_CONFIG)
        max_history: Optional[int] = cmd_config.get("max_history", 50)
        rollback_partial: bool = cmd_config.get("rollback_partial", True)
        self.history = CommandLog(max_size=max_history, rollback_partial=rollback_partial)
        self.logger.info(
            f"CommandExecutor initialized with history size {max_history}, "
            f"rollback_partial={rollback_partial}"
        )

    def execute(self, command: BaseCommand) -> Any:
        """
        Executes a Command object and records it.

        Args:
            command (BaseCommand): The command to execute.

        Returns:
            Any: command.result.

        Raises whatever the command raised, after publishing COMMAND_EVENT.FAILED.
        """
        description = command.describe()
        self.logger.info(f"Executing command: {description}")
        try:
            result = self.history.run(command)
        except Exception as e:
            self.events.publish("COMMAND_EVENT.FAILED", command=command, error=e)
            raise
        self.events.publish("COMMAND_EVENT.EXECUTED", command=command, description=description)
        return result

    def undo(self) -> BaseCommand:
        """
        Undoes the last executed command and returns it.
        """
        command = self.history.undo_last()
        self._announce_undo(command)
        return command

    def undo_all(self) -> int:
        """Undoes every logged command. Returns the count."""
        count = 0
        while len(self.history):
            self.undo()
            count += 1
        self.logger.info(f"Undid {count} commands.")
        return count

    def checkpoint(self) -> int:
        return self.history.checkpoint()

    def undo_to(self, checkpoint: int) -> int:
        """Undoes commands until the history is back at `checkpoint`. Returns the count."""
        self.history.validate_checkpoint(checkpoint)
        count = 0
        while self.history.checkpoint() > checkpoint:
            self.undo()
            count += 1
        return count

    def _announce_undo(self, command: BaseCommand):
        self.logger.info(f"Undid command: {command.describe()}")
        self.events.publish("COMMAND_EVENT.UNDONE", command=command, description=command.describe())
