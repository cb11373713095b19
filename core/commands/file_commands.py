# file: core/commands/file_commands.py

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from core.commands.base_command import BaseCommand
from core.exceptions import FileOperationError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def _write_new_file(path: Path, data: bytes):
    """
    Creates `path` exclusively and writes `data` to it.
    If the write fails after the file was created, the partial file is removed.
    """
    try:
        f = open(path, "xb")
    except OSError as e:
        raise FileOperationError(f"Cannot create file {path}: {e}") from e
    try:
        with f:
            f.write(data)
    except OSError as e:
        try:
            os.remove(path)
        except OSError as e_remove:
            logger.error(f"Failed to remove partially written file {path}: {e_remove}")
        raise FileOperationError(f"Failed to write file {path}: {e}") from e


class CreateFile(BaseCommand):
    """
    Creates a new file with the given content.

    Refuses to overwrite: execute fails if the path already exists.
    Undo deletes the file.
    """
    def __init__(self, path: PathLike, content: Union[str, bytes], encoding: str = "utf-8"):
        self.path = Path(path)
        self.content = content
        self.encoding = encoding
        super().__init__(f"Create file {self.path}")

    def _do(self):
        data = self.content.encode(self.encoding) if isinstance(self.content, str) else self.content
        _write_new_file(self.path, data)
        self.logger.info(f"Created {self.path} ({len(data)} bytes)")

    def _undo(self):
        try:
            os.remove(self.path)
        except OSError as e:
            raise FileOperationError(f"Cannot remove file {self.path}: {e}") from e
        self.logger.info(f"Removed {self.path}")


class DeleteFile(BaseCommand):
    """
    Deletes a file, keeping its full content in memory so undo can recreate it.
    """
    def __init__(self, path: PathLike):
        self.path = Path(path)
        self._content: Optional[bytes] = None
        super().__init__(f"Delete file {self.path}")

    def _do(self):
        try:
            with open(self.path, "rb") as f:
                content = f.read()
            os.remove(self.path)
        except OSError as e:
            raise FileOperationError(f"Cannot delete file {self.path}: {e}") from e
        self._content = content
        self.logger.info(f"Deleted {self.path} (buffered {len(content)} bytes)")

    def _undo(self):
        _write_new_file(self.path, self._content)
        self.logger.info(f"Restored {self.path}")
        self._content = None


class CopyFile(BaseCommand):
    """
    Copies the content of `source` to `target`.

    Known limitation: if `target` already existed, undo only truncates it to
    empty. Its previous content is not restored. If `target` did not exist,
    undo deletes it.
    """
    def __init__(self, source: PathLike, target: PathLike):
        self.source = Path(source)
        self.target = Path(target)
        self._target_existed: Optional[bool] = None
        super().__init__(f"Copy file {self.source} to {self.target}")

    def _do(self):
        target_existed = self.target.exists()
        try:
            shutil.copyfile(self.source, self.target)
        except OSError as e:
            raise FileOperationError(f"Cannot copy {self.source} to {self.target}: {e}") from e
        self._target_existed = target_existed
        self.logger.info(f"Copied {self.source} to {self.target} (target existed: {target_existed})")

    def _undo(self):
        try:
            if self._target_existed:
                with open(self.target, "r+b") as f:
                    f.truncate(0)
            else:
                os.remove(self.target)
        except OSError as e:
            raise FileOperationError(f"Cannot revert copy to {self.target}: {e}") from e
        self.logger.info(f"Reverted copy to {self.target}")
        self._target_existed = None
