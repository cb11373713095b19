# file: core/commands/command_log.py

import logging
import threading
from typing import List, Optional, Tuple

from core.commands.base_command import BaseCommand, CommandState
from core.exceptions import EmptyLogError, InvalidStateError, RollbackError


class CommandLog:
    """
    Records successfully executed commands and undoes them last-in, first-out.

    Only commands whose execute succeeded are ever appended. When `max_size`
    is set, the oldest entries are dropped once it is exceeded and can no
    longer be undone. Checkpoints are absolute positions, so a checkpoint
    taken before entries were dropped stays comparable with later ones.
    """
    def __init__(self, max_size: Optional[int] = None, rollback_partial: bool = True):
        if max_size is not None and max_size < 1:
            raise ValueError(f"max_size must be a positive integer or None, got {max_size}")
        self.history: List[BaseCommand] = []
        self.max_size = max_size
        self.rollback_partial = rollback_partial
        self._dropped = 0
        self._lock = threading.RLock()
        self.logger = logging.getLogger(self.__class__.__name__)

    def __len__(self) -> int:
        return len(self.history)

    @property
    def commands(self) -> Tuple[BaseCommand, ...]:
        """Snapshot of the log, oldest first."""
        with self._lock:
            return tuple(self.history)

    @property
    def last_description(self) -> Optional[str]:
        """Description of the command the next undo would revert."""
        with self._lock:
            if self.history:
                return self.history[-1].describe()
            return None

    def descriptions(self) -> List[str]:
        with self._lock:
            return [command.describe() for command in self.history]

    def run(self, command: BaseCommand):
        """
        Executes a command and appends it to the log on success.

        On failure the error propagates and the log is left unchanged. If the
        command did partial work (a composite whose child failed) and
        `rollback_partial` is set, that work is undone first.
        """
        with self._lock:
            try:
                command.execute()
            except Exception as e:
                self.logger.error(f"Command '{command.describe()}' failed: {e}")
                if self.rollback_partial and command.state is CommandState.UNEXECUTED:
                    self._rollback(command, e)
                raise
            self._append(command)
            return command.result

    def push(self, command: BaseCommand):
        """Adds an already executed command to the log."""
        if not command.executed:
            raise InvalidStateError(
                f"Cannot log '{command.describe()}': command is {command.state.value}."
            )
        with self._lock:
            self._append(command)

    def undo_last(self) -> BaseCommand:
        """Undoes the last command in the log and returns it."""
        with self._lock:
            if not self.history:
                raise EmptyLogError("No commands in history to undo.")
            command = self.history.pop()
            try:
                self.logger.info(f"Undoing command: {command.describe()}")
                command.undo()
            except Exception:
                # Still executed, so keep it undoable.
                self.history.append(command)
                raise
            return command

    def undo_all(self) -> int:
        """Undoes every command in the log, newest first. Returns the count."""
        with self._lock:
            count = 0
            while self.history:
                self.undo_last()
                count += 1
            return count

    def checkpoint(self) -> int:
        """Returns a marker for the current position in the log."""
        with self._lock:
            return self._dropped + len(self.history)

    def validate_checkpoint(self, checkpoint: int):
        """Raises InvalidStateError unless the log can be undone back to `checkpoint`."""
        position = self.checkpoint()
        if checkpoint > position:
            raise InvalidStateError(
                f"Checkpoint {checkpoint} is ahead of the log position {position}."
            )
        if checkpoint < self._dropped:
            raise InvalidStateError(
                f"Checkpoint {checkpoint} refers to commands no longer in the log."
            )

    def undo_to(self, checkpoint: int) -> int:
        """Undoes commands until the log is back at `checkpoint`. Returns the count."""
        with self._lock:
            self.validate_checkpoint(checkpoint)
            count = 0
            while self.checkpoint() > checkpoint:
                self.undo_last()
                count += 1
            return count

    def clear(self):
        """Forgets every logged command without undoing it."""
        with self._lock:
            self._dropped += len(self.history)
            self.history.clear()
            self.logger.debug("Command history cleared.")

    def _append(self, command: BaseCommand):
        self.history.append(command)
        if self.max_size is not None and len(self.history) > self.max_size:
            dropped = self.history.pop(0)
            self._dropped += 1
            self.logger.debug(f"History full, dropped oldest command: {dropped.describe()}")
        self.logger.debug(f"Pushed command to history. Size: {len(self.history)}")

    def _rollback(self, command: BaseCommand, cause: Exception):
        """
        Undoes the partial work of a failed command. If any of it cannot be
        undone, raises RollbackError chained to the original failure.
        """
        try:
            undone = command.rollback()
        except RollbackError as e:
            self.logger.error(f"Rollback of '{command.describe()}' left {len(e.errors)} commands applied.")
            raise RollbackError(
                f"Command '{command.describe()}' failed ({cause}) and {len(e.errors)} "
                f"of its commands could not be rolled back.",
                errors=e.errors,
                undone=e.undone,
            ) from cause
        except Exception as e:
            self.logger.error(f"Rollback of '{command.describe()}' failed: {e}", exc_info=True)
            raise RollbackError(
                f"Command '{command.describe()}' failed ({cause}) and its rollback failed: {e}",
                errors=[e],
            ) from cause
        if undone:
            self.logger.info(f"Rolled back {undone} partially executed commands.")
