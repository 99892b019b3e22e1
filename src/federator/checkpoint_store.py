"""
Durable storage of the last fully processed source chain block.
"""

import contextlib
import logging
import os
import tempfile
from pathlib import Path

from .config import CHECKPOINT_FILENAME
from .errors import StorageError

logger = logging.getLogger(__name__)


class CheckpointStore:
    """
    Keeps the last processed block height in a plain text file.

    Writes go to a temporary file in the same directory which then replaces
    the checkpoint, so readers only ever see a complete height.
    """

    def __init__(self, storage_path: str | os.PathLike, filename: str = CHECKPOINT_FILENAME):
        """
        Initialize the store.

        Args:
            storage_path: Directory holding the checkpoint file
            filename: Name of the checkpoint file
        """
        self.storage_path = Path(storage_path)
        self.path = self.storage_path / filename

    def load(self) -> int | None:
        """
        Read the checkpoint.

        Returns:
            The saved height, or None if absent or unreadable
        """
        try:
            content = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Could not read checkpoint {self.path}: {e}")
            return None

        try:
            height = int(content)
        except ValueError:
            logger.warning(f"Ignoring malformed checkpoint {self.path}: {content!r}")
            return None

        if height < 0:
            logger.warning(f"Ignoring negative checkpoint {self.path}: {height}")
            return None
        return height

    def save(self, height: int) -> None:
        """
        Atomically replace the checkpoint with ``height``.

        Raises:
            StorageError: If the checkpoint could not be written
        """
        if height < 0:
            raise StorageError(f"Refusing to save negative checkpoint {height}")

        try:
            self.storage_path.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=self.storage_path, prefix=f".{self.path.name}.", suffix=".tmp"
            )
        except OSError as e:
            raise StorageError(f"Cannot prepare checkpoint in {self.storage_path}: {e}") from e

        try:
            try:
                f = os.fdopen(temp_fd, "w", encoding="utf-8")
            except Exception:
                os.close(temp_fd)
                raise
            with f:
                f.write(str(height))
                f.flush()
                os.fsync(f.fileno())

            os.replace(temp_path, self.path)
        except OSError as e:
            # A read-only filesystem rejects the cleanup as well
            with contextlib.suppress(OSError):
                os.unlink(temp_path)
            raise StorageError(f"Failed to save checkpoint {height} to {self.path}: {e}") from e

        logger.debug(f"Checkpoint saved: {height}")
