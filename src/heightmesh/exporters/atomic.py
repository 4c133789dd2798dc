"""Write-then-rename helper shared by all sinks."""

import logging
import os
import tempfile
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from ..errors import SinkWriteError

logger = logging.getLogger(__name__)


@contextmanager
def atomic_output(output_path: str) -> Iterator[BinaryIO]:
    """Yield a binary file that replaces ``output_path`` only if the block succeeds.

    The data goes to a temporary file in the destination directory, so a
    failed write never leaves a truncated file at ``output_path``. OS
    errors are reported as SinkWriteError.
    """
    directory = os.path.dirname(os.path.abspath(output_path))
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=".", suffix=".part", dir=directory,
        )
    except OSError as e:
        raise SinkWriteError(f"Cannot write {output_path!r}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as fh:
            yield fh
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, output_path)
    except BaseException as e:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        if isinstance(e, OSError) and not isinstance(e, SinkWriteError):
            raise SinkWriteError(f"Cannot write {output_path!r}: {e}") from e
        raise
    logger.debug("Wrote %s", output_path)
