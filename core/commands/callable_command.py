# file: core/commands/callable_command.py

from typing import Any, Callable, Optional

from core.commands.base_command import BaseCommand
from core.exceptions import CommandError


class CallableCommand(BaseCommand):
    """
    A command built from plain callables instead of a dedicated subclass.

    Useful when the action is a small piece of code waiting to run at the
    right time. The return value of `action` becomes `result`. Without a
    `reverse` callable the command can be executed but not undone.
    """
    def __init__(
        self,
        action: Callable[[], Any],
        reverse: Optional[Callable[[], Any]] = None,
        description: Optional[str] = None,
    ):
        super().__init__(description or getattr(action, "__name__", None))
        self.action = action
        self.reverse = reverse

    @property
    def undoable(self) -> bool:
        return self.reverse is not None

    def _do(self) -> Any:
        return self.action()

    def _undo(self):
        if self.reverse is None:
            raise CommandError(f"Command '{self.description}' has no reverse action.")
        self.reverse()
