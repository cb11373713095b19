# file: core/commands/composite_command.py

from typing import Iterable, List, Optional

from core.commands.base_command import BaseCommand, CommandState
from core.exceptions import InvalidStateError, RollbackError


class CompositeCommand(BaseCommand):
    """
    An ordered group of commands that is itself a command.

    Children execute in insertion order and are undone in reverse order.
    If a child fails, the error propagates and the children that already ran
    are left in place; `rollback()` undoes them. The composite never rolls
    back on its own, the caller decides (CommandLog does it by default).
    """
    def __init__(self, commands: Optional[Iterable[BaseCommand]] = None, description: Optional[str] = None):
        super().__init__(description)
        self.commands: List[BaseCommand] = list(commands or [])
        # Children this composite executed itself, in execution order
        self._ran: List[BaseCommand] = []
        self._failed: Optional[BaseCommand] = None

    @property
    def description(self) -> str:
        if self._description:
            return self._description
        return "; ".join(command.describe() for command in self.commands) or self.__class__.__name__

    def add_command(self, command: BaseCommand):
        if self.state is not CommandState.UNEXECUTED:
            raise InvalidStateError(f"Cannot add to composite that is {self.state.value}.")
        self.commands.append(command)

    def executed_children(self) -> List[BaseCommand]:
        """Children this composite executed that are still EXECUTED, in execution order."""
        return [command for command in self._ran if command.executed]

    def _do(self):
        for command in self.commands:
            try:
                command.execute()
            except Exception:
                self._failed = command
                raise
            self._ran.append(command)
        self.logger.info(f"Executed {len(self.commands)} commands")

    def _undo(self):
        # Skips children a previous, failed undo already reverted.
        for command in reversed(self._ran):
            if command.executed:
                command.undo()

    def rollback(self) -> int:
        """
        Undoes the children a failed execute ran, newest first.

        Keeps going past children that cannot be undone and raises
        RollbackError afterwards. Returns the number of commands undone.
        """
        if self.state is not CommandState.UNEXECUTED:
            raise InvalidStateError(f"Cannot roll back composite that is {self.state.value}.")

        undone = 0
        errors: List[Exception] = []

        # The failed child may be a composite with partial work of its own.
        if self._failed is not None and self._failed.state is CommandState.UNEXECUTED:
            try:
                undone += self._failed.rollback()
            except RollbackError as e:
                undone += e.undone
                errors.extend(e.errors)

        for command in reversed(self.executed_children()):
            try:
                command.undo()
            except Exception as e:
                self.logger.error(f"Could not roll back '{command.describe()}': {e}")
                errors.append(e)
            else:
                undone += 1

        if undone:
            self.logger.warning(f"Rolled back {undone} commands of '{self.description}'")
        if errors:
            raise RollbackError(
                f"{len(errors)} commands of '{self.description}' could not be rolled back.",
                errors=errors,
                undone=undone,
            )
        return undone
