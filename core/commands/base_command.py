# file: core/commands/base_command.py

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

from core.exceptions import InvalidStateError


class CommandState(Enum):
    UNEXECUTED = "unexecuted"
    EXECUTED = "executed"
    UNDONE = "undone"


class BaseCommand(ABC):
    """
    Abstract base class for a command in the Command Pattern.

    A command is executed exactly once and may be undone at most once after
    that. Subclasses implement `_do` and `_undo`; the public `execute` and
    `undo` methods own the state transitions, so a failing `_do` leaves the
    command UNEXECUTED and a failing `_undo` leaves it EXECUTED.
    """
    def __init__(self, description: Optional[str] = None):
        self._description = description
        self.state: CommandState = CommandState.UNEXECUTED
        self.result: Any = None
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def description(self) -> str:
        return self._description or self.__class__.__name__

    @property
    def executed(self) -> bool:
        return self.state is CommandState.EXECUTED

    def describe(self) -> str:
        """Returns a human-readable description of the command."""
        return self.description

    def execute(self) -> Any:
        """
        Execute the command.
        Returns self.result (None for commands that produce no value).
        """
        if self.state is not CommandState.UNEXECUTED:
            raise InvalidStateError(
                f"Cannot execute '{self.description}': command is {self.state.value}."
            )
        self.logger.debug(f"Executing: {self.description}")
        self.result = self._do()
        self.state = CommandState.EXECUTED
        return self.result

    def undo(self):
        """
        Reverse the effects of the execute method.
        """
        if self.state is not CommandState.EXECUTED:
            raise InvalidStateError(
                f"Cannot undo '{self.description}': command is {self.state.value}."
            )
        self.logger.debug(f"Undoing: {self.description}")
        self._undo()
        self.state = CommandState.UNDONE

    def rollback(self) -> int:
        """
        Reverts whatever a failed execute left behind and returns the number
        of commands undone. Leaf commands are atomic, so there is nothing to do.
        """
        return 0

    @abstractmethod
    def _do(self) -> Any:
        """Perform the forward action and record any state needed to reverse it."""
        pass

    @abstractmethod
    def _undo(self):
        """Perform the exact inverse of `_do` using the recorded state."""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.description!r} ({self.state.value})>"
