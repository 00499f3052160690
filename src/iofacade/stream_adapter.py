"""Provides StreamAdapter, which wraps a stream as a binary file object."""

from __future__ import annotations

import io
import logging
import os
from typing import Any, BinaryIO, Iterable, Iterator, Optional

from typing_extensions import Buffer

from iofacade.capabilities import (
    Combined,
    InputOnly,
    OutputOnly,
    StreamHandles,
    StreamProbe,
    direction_buffer_size,
    direction_can_truncate,
    direction_is_seekable,
    is_fd_based,
    is_readable,
    is_seekable,
    is_writable,
    probe_stream,
)
from iofacade.config import AdapterConfig, get_default_config
from iofacade.exceptions import (
    ClosedStreamError,
    StreamIOError,
    TypeMismatchError,
    UnsupportedOperationError,
)
from iofacade.internal.translation import (
    raise_translated,
    run_with_exception_translation,
)
from iofacade.line_reader import LINE_DELIMITER, LineReader
from iofacade.types import StreamShape, Whence

logger = logging.getLogger(__name__)


def _as_byte_view(data: Any) -> memoryview:
    """Return a flat byte view of a bytes-like object."""
    try:
        view = memoryview(data)
    except TypeError as e:
        raise TypeMismatchError(
            f"a bytes-like object is required, not '{type(data).__name__}'"
        ) from e

    if view.format != "B" or view.ndim != 1:
        try:
            view = view.cast("B")
        except TypeError as e:
            raise TypeMismatchError("a contiguous bytes-like object is required") from e
    return view


class StreamAdapter(io.RawIOBase, BinaryIO):
    """
    Wraps an input, output or combined stream as a binary `file object`_.

    The adapter does not add buffering or seeking of its own; it relies on the
    capabilities of the wrapped stream, which are determined once when the
    adapter is created.

    .. _file object: https://docs.python.org/3/glossary.html#term-file-object
    """

    def __init__(
        self,
        stream: Any,
        *,
        probe: StreamProbe = probe_stream,
        config: AdapterConfig | None = None,
    ):
        """
        Initialize the StreamAdapter.

        Args:
            stream: The stream to wrap.
            probe: A callable that classifies ``stream`` into its input, output
                or combined handles. Embedding code can supply its own to
                recognize stream types that don't match the protocols in
                :mod:`iofacade.types`.
            config: Configuration to use. Defaults to the current default
                configuration.

        Raises:
            TypeMismatchError: If ``stream`` is not a recognized stream.
        """
        super().__init__()
        # Set before probing, so that close() and closed work on an adapter
        # whose initialization failed.
        self._handles: Optional[StreamHandles] = None
        self._line_reader: Optional[LineReader] = None

        self._stream = stream
        self._config = config if config is not None else get_default_config()

        handles = probe(stream)
        if not isinstance(handles, (InputOnly, OutputOnly, Combined)):
            raise TypeMismatchError(
                f"stream probe returned {type(handles).__name__}, not stream handles"
            )

        self._input_chunk_size = self._config.chunk_size_for(
            direction_buffer_size(handles.input)
        )
        self._output_chunk_size = self._config.chunk_size_for(
            direction_buffer_size(handles.output)
        )
        if handles.input is not None:
            self._line_reader = LineReader(handles.input, self._input_chunk_size)
        self._handles = handles

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def closed(self) -> bool:
        """``True`` if the wrapped stream is closed."""
        handles = getattr(self, "_handles", None)
        if handles is None:
            return True
        return run_with_exception_translation(handles.is_closed)

    def close(self) -> None:
        """
        Close the wrapped stream.

        A combined stream is closed as a single unit. Calling this method on a
        closed adapter has no effect.
        """
        if self.closed:
            return

        handles = self._handles
        assert handles is not None
        logger.debug("Closing %s stream %r", handles.shape, self._stream)

        run_with_exception_translation(handles.close)
        # Read-ahead survives a failed close.
        if self._line_reader is not None:
            self._line_reader.discard()

    def __enter__(self) -> StreamAdapter:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _check_closed(self) -> StreamHandles:
        if self.closed:
            raise ClosedStreamError()
        assert self._handles is not None
        return self._handles

    def _check_readable(self) -> LineReader:
        self._check_closed()
        if self._line_reader is None:
            raise UnsupportedOperationError("Stream is not readable")
        return self._line_reader

    def _check_writable(self) -> Any:
        handles = self._check_closed()
        if handles.output is None:
            raise UnsupportedOperationError("Stream is not writable")
        return handles.output

    def _check_seekable(self) -> StreamHandles:
        handles = self._check_closed()
        if not is_seekable(handles):
            raise UnsupportedOperationError("Underlying stream is not seekable")
        return handles

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------
    @property
    def shape(self) -> StreamShape:
        """Whether the wrapped stream is an input, output or combined stream."""
        assert self._handles is not None
        return self._handles.shape

    @property
    def mode(self) -> str:
        return {
            StreamShape.INPUT: "rb",
            StreamShape.OUTPUT: "wb",
            StreamShape.COMBINED: "rb+",
        }[self.shape]

    def readable(self) -> bool:
        return is_readable(self._check_closed())

    def writable(self) -> bool:
        return is_writable(self._check_closed())

    def seekable(self) -> bool:
        return is_seekable(self._check_closed())

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------
    def _read_exact(self, reader: LineReader, n: int) -> bytes:
        try:
            data = bytearray()
            while len(data) < n:
                chunk = reader.read_chunk(n - len(data))
                if not chunk:
                    break
                data.extend(chunk)
            return bytes(data)
        except MemoryError as e:
            raise_translated(e)

    def _read_until_eof(self, reader: LineReader) -> bytes:
        try:
            chunks = []
            while True:
                chunk = reader.read_chunk(self._input_chunk_size)
                if not chunk:
                    break
                chunks.append(chunk)
            return b"".join(chunks)
        except MemoryError as e:
            raise_translated(e)

    def read(self, size: Optional[int] = -1) -> bytes:
        """
        Read up to ``size`` bytes and return them.

        If ``size`` is omitted or negative, all bytes until EOF are returned.
        Fewer bytes than requested are returned only if EOF is reached.

        Raises:
            ClosedStreamError: If the stream is closed.
            UnsupportedOperationError: If the stream is not readable.
            StreamIOError: If the wrapped stream reports an error.
        """
        reader = self._check_readable()
        if size is None or size < 0:
            return self._read_until_eof(reader)
        if size == 0:
            return b""
        return self._read_exact(reader, size)

    def read1(self, size: Optional[int] = -1) -> bytes:
        return self.read(size)

    def readall(self) -> bytes:
        """Read and return all the bytes until EOF."""
        reader = self._check_readable()
        return self._read_until_eof(reader)

    def readinto(self, buffer: Buffer) -> int:
        """
        Read bytes into a pre-allocated, writable bytes-like object.

        Returns:
            The number of bytes read, which is less than the size of ``buffer``
            only if EOF was reached.
        """
        reader = self._check_readable()
        view = _as_byte_view(buffer)
        if view.readonly:
            raise TypeMismatchError(
                "readinto() argument must be a writable bytes-like object"
            )

        total = 0
        while total < len(view):
            chunk = reader.read_chunk(len(view) - total)
            if not chunk:
                break
            view[total : total + len(chunk)] = chunk
            total += len(chunk)
        return total

    def readinto1(self, buffer: Buffer) -> int:
        return self.readinto(buffer)

    def readline(self, size: Optional[int] = -1) -> bytes:
        """
        Read and return one line, including its trailing linefeed if present.

        If ``size`` is non-negative, at most ``size`` bytes are returned. The
        rest of the line is consumed and discarded, not left for the next read.
        """
        reader = self._check_readable()
        if size == 0:
            return b""

        try:
            line, found = reader.read_line()
        except MemoryError as e:
            raise_translated(e)
        if found:
            line += LINE_DELIMITER
        if size is not None and size > 0:
            line = line[:size]
        return line

    def readlines(self, hint: Optional[int] = 0) -> list[bytes]:
        """
        Read and return a list of lines.

        If ``hint`` is positive, no more lines are read once the total size of
        the lines read so far reaches it.
        """
        self._check_readable()
        lines: list[bytes] = []
        total = 0
        while True:
            line = self.readline()
            if not line:
                break
            lines.append(line)
            total += len(line)
            if hint is not None and 0 < hint <= total:
                break
        return lines

    def __iter__(self) -> Iterator[bytes]:
        self._check_closed()
        return self

    def __next__(self) -> bytes:
        line = self.readline()
        if not line:
            raise StopIteration
        return line

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------
    def _rewind_read_ahead(self) -> None:
        """Move the input back over the read-ahead bytes, to the tell() position.

        Needed before writing, as the two directions of a combined stream may
        share one position.
        """
        reader = self._line_reader
        handles = self._handles
        assert handles is not None
        if (
            reader is None
            or not reader.pending_size
            or not direction_is_seekable(handles.input)
        ):
            return

        pending = reader.pending_size
        run_with_exception_translation(
            lambda: handles.input.seek(-pending, Whence.CUR)  # type: ignore[union-attr]
        )
        reader.discard()

    def _write_all(self, output: Any, view: memoryview) -> None:
        written = 0
        while written < len(view):
            remaining = view[written:]
            n = run_with_exception_translation(lambda: output.write(remaining))
            if not isinstance(n, int) or n <= 0 or n > len(remaining):
                raise StreamIOError(
                    f"write() of {len(remaining)} bytes returned {n!r}"
                )
            written += n

    def write(self, data: Buffer) -> int:
        """
        Write ``data`` to the wrapped stream.

        Returns:
            The number of bytes written, which is always the length of ``data``.
            If the wrapped stream fails partway, StreamIOError is raised and the
            number of bytes already written is not reported.
        """
        output = self._check_writable()
        view = _as_byte_view(data)
        if not view.nbytes:
            return 0
        self._rewind_read_ahead()
        self._write_all(output, view)
        return view.nbytes

    def writelines(self, lines: Iterable[Buffer]) -> None:
        """
        Write a sequence of bytes-like objects. No line separators are added.

        The items are gathered into chunks of the stream's buffer size before
        being written. If an item is not bytes-like, TypeMismatchError is
        raised; chunks written before that point stay written.
        """
        output = self._check_writable()
        self._rewind_read_ahead()
        chunk_size = self._output_chunk_size
        staging = bytearray(chunk_size)
        staged = 0

        for item in lines:
            view = _as_byte_view(item)
            offset = 0
            while offset < len(view):
                take = min(chunk_size - staged, len(view) - offset)
                staging[staged : staged + take] = view[offset : offset + take]
                staged += take
                offset += take
                if staged == chunk_size:
                    self._write_all(output, memoryview(staging))
                    staged = 0

        if staged:
            self._write_all(output, memoryview(staging)[:staged])

    def flush(self) -> None:
        """
        Flush the write buffers of the wrapped stream if applicable.

        This does nothing for read-only streams, or for streams that don't
        support flushing.
        """
        handles = self._check_closed()
        if handles.output is None:
            return

        try:
            handles.output.flush()
        except (io.UnsupportedOperation, NotImplementedError) as e:
            # Implementing flush is optional for the wrapped stream.
            logger.debug("Stream %r does not support flush: %s", handles.output, e)
        except Exception as e:  # noqa: BLE001
            raise_translated(e)

    # ------------------------------------------------------------------
    # Seeking
    # ------------------------------------------------------------------
    def _tell(self, handles: StreamHandles) -> int:
        # The input side is authoritative when both directions can seek; the
        # two positions are not compared.
        if direction_is_seekable(handles.input):
            assert self._line_reader is not None
            position = run_with_exception_translation(handles.input.tell)  # type: ignore[union-attr]
            return position - self._line_reader.pending_size
        return run_with_exception_translation(handles.output.tell)  # type: ignore[union-attr]

    def tell(self) -> int:
        """Return the current stream position."""
        handles = self._check_seekable()
        return self._tell(handles)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """
        Change the stream position to ``offset``, relative to ``whence``.

        The position is changed on every direction that can seek, input first.

        Returns:
            The new absolute position.
        """
        handles = self._check_seekable()
        try:
            whence = Whence(whence)
        except ValueError:
            raise ValueError(
                f"invalid whence ({whence}, should be 0, 1 or 2)"
            ) from None

        if direction_is_seekable(handles.input):
            assert self._line_reader is not None
            input_offset = offset
            if whence == Whence.CUR:
                input_offset -= self._line_reader.pending_size
            run_with_exception_translation(
                lambda: handles.input.seek(input_offset, whence)  # type: ignore[union-attr]
            )
            self._line_reader.discard()

        if direction_is_seekable(handles.output):
            run_with_exception_translation(
                lambda: handles.output.seek(offset, whence)  # type: ignore[union-attr]
            )

        return self._tell(handles)

    def truncate(self, size: Optional[int] = None) -> int:
        """
        Resize the stream to ``size`` bytes, or to the current position if
        ``size`` is None.

        Returns:
            The new size.
        """
        handles = self._check_seekable()
        output = handles.output
        if not direction_can_truncate(output):
            raise UnsupportedOperationError("truncate")

        self._rewind_read_ahead()
        if size is None:
            size = run_with_exception_translation(output.tell)  # type: ignore[union-attr]
        run_with_exception_translation(lambda: output.truncate(size))  # type: ignore[union-attr]
        return size

    # ------------------------------------------------------------------
    # File descriptors
    # ------------------------------------------------------------------
    def _fd(self, handles: StreamHandles) -> int:
        # The output descriptor when the stream has both.
        direction = handles.output if handles.output is not None else handles.input
        return run_with_exception_translation(direction.get_fd)  # type: ignore[union-attr]

    def fileno(self) -> int:
        """Return the file descriptor of the wrapped stream, if it has one."""
        handles = self._check_closed()
        if not is_fd_based(handles):
            raise UnsupportedOperationError("fileno")
        return self._fd(handles)

    def isatty(self) -> bool:
        """Return whether the wrapped stream is connected to a terminal."""
        handles = self._check_closed()
        if not is_fd_based(handles):
            return False
        return os.isatty(self._fd(handles))

    def __repr__(self) -> str:
        handles = getattr(self, "_handles", None)
        shape = handles.shape if handles is not None else "invalid"
        return f"StreamAdapter({shape}, {getattr(self, '_stream', None)!r})"
