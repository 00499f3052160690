import logging

from iofacade.exceptions import StreamIOError
from iofacade.internal.translation import run_with_exception_translation
from iofacade.types import InputStream

logger = logging.getLogger(__name__)

LINE_DELIMITER = b"\n"


class LineReader:
    """
    Reads from an input stream, splitting lines on a linefeed byte.

    Finding the end of a line can require reading past it. The bytes read
    ahead are kept here and handed out before anything else by
    :meth:`read_chunk`, so every read of the input must go through this object
    to stay consistent with the stream position. Call :meth:`discard` after the
    input has been repositioned.
    """

    def __init__(self, stream: InputStream, chunk_size: int):
        self._stream = stream
        self._chunk_size = chunk_size
        self._pending = bytearray()

    @property
    def pending_size(self) -> int:
        """Number of bytes read from the stream but not yet handed out."""
        return len(self._pending)

    def discard(self) -> None:
        if self._pending:
            logger.debug("Discarding %d read-ahead bytes", len(self._pending))
        self._pending.clear()

    def read_chunk(self, n: int) -> bytes:
        """Return up to ``n`` bytes, or an empty result at EOF.

        Read-ahead bytes are returned first, without touching the stream.

        Raises:
            StreamIOError: If the stream returns more than ``n`` bytes.
        """
        if self._pending:
            data = bytes(self._pending[:n])
            del self._pending[:n]
            return data
        data = run_with_exception_translation(lambda: self._stream.read(n))
        if len(data) > n:
            raise StreamIOError(f"read() of {n} bytes returned {len(data)} bytes")
        return data

    def read_line(self) -> tuple[bytes, bool]:
        """Read the next line.

        Returns:
            The line without its delimiter, and whether a delimiter was found.
            At EOF the remaining bytes are returned (possibly none) with False.
        """
        scanned = 0
        while True:
            index = self._pending.find(LINE_DELIMITER, scanned)
            if index >= 0:
                line = bytes(self._pending[:index])
                del self._pending[: index + len(LINE_DELIMITER)]
                return line, True

            scanned = len(self._pending)
            chunk = run_with_exception_translation(
                lambda: self._stream.read(self._chunk_size)
            )
            if not chunk:
                line = bytes(self._pending)
                self._pending.clear()
                return line, False
            self._pending.extend(chunk)
