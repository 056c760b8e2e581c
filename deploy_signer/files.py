"""
Whole-buffer transaction file I/O.
"""
import os
import logging
import tempfile
from pathlib import Path
from typing import Union

# Import portalocker for file locking
try:
    import portalocker
except ImportError:
    raise ImportError(
        "portalocker package is required for transaction file output. "
        "Install with: pip install portalocker"
    )

from .exceptions import TransactionIOError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def _lock_path(path: Path) -> str:
    """Get path for the lock file"""
    return str(path) + '.lock'


def read_transaction_file(path: PathLike) -> str:
    """
    Read a transaction file.

    Args:
        path: Input file

    Returns:
        File content as text

    Raises:
        TransactionIOError: If the file cannot be read or is not UTF-8
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise TransactionIOError(f"Failed to read input file {path}: {e}") from e


def write_transaction_file(path: PathLike, content: str, timeout: int = 10) -> Path:
    """
    Write a transaction file atomically.

    The content goes to a temporary file in the target directory which then
    replaces the target, so readers never observe a partial file. Concurrent
    writers to the same path are serialized through a lock file.

    Args:
        path: Output file
        content: Encoded transaction
        timeout: Seconds to wait for the lock

    Returns:
        The written path

    Raises:
        TransactionIOError: If the file cannot be written
    """
    path = Path(path)
    directory = path.parent if str(path.parent) else Path('.')
    tmp_name = None
    try:
        with portalocker.Lock(_lock_path(path), timeout=timeout):
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
            os.replace(tmp_name, path)
            tmp_name = None
    except (OSError, portalocker.LockException) as e:
        raise TransactionIOError(f"Failed to write output file {path}: {e}") from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.remove(tmp_name)

    logger.debug("Wrote %d bytes to %s", len(content), path)
    return path
