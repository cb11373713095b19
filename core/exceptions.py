# file: core/exceptions.py
"""
Defines the custom exception hierarchy for the command log.
"""

class CommandLogError(Exception):
    """Base exception for all application-specific errors."""
    pass

# --- Configuration Errors ---
class ConfigurationError(CommandLogError):
    """Error related to loading, parsing, or validating configuration."""
    pass

# --- Command Errors ---
class CommandError(CommandLogError):
    """Base error for command-related issues."""
    pass

class InvalidStateError(CommandError):
    """
    Raised when a command is driven out of order: undo before a successful
    execute, a second undo, or a second execute.
    """
    pass

class FileOperationError(CommandError, IOError):
    """Wraps a failed filesystem operation (not found, permission denied, already exists)."""
    pass

class RollbackError(CommandError):
    """
    Raised when some commands of a failed composite could not be undone.
    `errors` holds each undo failure, `undone` counts the commands that were reverted.
    """
    def __init__(self, message: str, errors=None, undone: int = 0):
        super().__init__(message)
        self.errors = list(errors or [])
        self.undone = undone

# --- Log Errors ---
class EmptyLogError(CommandError):
    """Raised when an undo is requested on an empty command log."""
    pass
