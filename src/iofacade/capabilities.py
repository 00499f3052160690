"""Classification of wrapped streams and per-direction capability checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Optional, Union

from iofacade.exceptions import TypeMismatchError
from iofacade.internal.translation import run_with_exception_translation
from iofacade.types import (
    BufferSized,
    FileDescriptorBased,
    InputStream,
    IOStream,
    OutputStream,
    Seekable,
    StreamShape,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputOnly:
    input: InputStream

    shape: ClassVar[StreamShape] = StreamShape.INPUT
    output: ClassVar[None] = None
    combined: ClassVar[None] = None

    def is_closed(self) -> bool:
        return self.input.is_closed()

    def close(self) -> None:
        self.input.close()


@dataclass(frozen=True)
class OutputOnly:
    output: OutputStream

    shape: ClassVar[StreamShape] = StreamShape.OUTPUT
    input: ClassVar[None] = None
    combined: ClassVar[None] = None

    def is_closed(self) -> bool:
        return self.output.is_closed()

    def close(self) -> None:
        self.output.close()


@dataclass(frozen=True)
class Combined:
    """A bidirectional stream and the two ends obtained from it.

    Only ``combined`` is owned; ``input`` and ``output`` are views into it and
    are never closed on their own.
    """

    combined: IOStream
    input: InputStream
    output: OutputStream

    shape: ClassVar[StreamShape] = StreamShape.COMBINED

    def is_closed(self) -> bool:
        return self.combined.is_closed()

    def close(self) -> None:
        self.combined.close()


StreamHandles = Union[InputOnly, OutputOnly, Combined]

StreamProbe = Callable[[Any], StreamHandles]


def probe_stream(obj: Any) -> StreamHandles:
    """Classify ``obj`` as an input, output or combined stream.

    The checks are made in that order, so an object that satisfies more than
    one protocol is classified by the first match.

    Raises:
        TypeMismatchError: If ``obj`` is not a recognized stream.
    """
    if obj is None:
        raise TypeMismatchError("expected a stream object, got None")

    if isinstance(obj, InputStream):
        logger.debug("Classified %r as an input stream", obj)
        return InputOnly(obj)

    if isinstance(obj, OutputStream):
        logger.debug("Classified %r as an output stream", obj)
        return OutputOnly(obj)

    if isinstance(obj, IOStream):
        input_stream = run_with_exception_translation(obj.get_input_stream)
        output_stream = run_with_exception_translation(obj.get_output_stream)
        if not isinstance(input_stream, InputStream) or not isinstance(
            output_stream, OutputStream
        ):
            raise TypeMismatchError(
                f"combined stream {obj!r} has invalid input/output ends"
            )
        logger.debug("Classified %r as a combined stream", obj)
        return Combined(obj, input_stream, output_stream)

    raise TypeMismatchError(f"expected a stream object, got {type(obj).__name__}")


def direction_is_seekable(stream: Optional[object]) -> bool:
    """Check that a direction implements seeking and reports that it can seek.

    Some streams implement the seek methods but answer False to ``can_seek()``.
    """
    if stream is None or not isinstance(stream, Seekable):
        return False
    return bool(run_with_exception_translation(stream.can_seek))


def direction_can_truncate(stream: Optional[object]) -> bool:
    if not direction_is_seekable(stream):
        return False
    return bool(run_with_exception_translation(stream.can_truncate))  # type: ignore[union-attr]


def direction_is_fd_based(stream: Optional[object]) -> bool:
    return stream is not None and isinstance(stream, FileDescriptorBased)


def direction_buffer_size(stream: Optional[object]) -> Optional[int]:
    if stream is None or not isinstance(stream, BufferSized):
        return None
    return run_with_exception_translation(stream.get_buffer_size)


def owned_directions(handles: StreamHandles) -> list[object]:
    return [d for d in (handles.input, handles.output) if d is not None]


def is_readable(handles: StreamHandles) -> bool:
    return handles.input is not None


def is_writable(handles: StreamHandles) -> bool:
    return handles.output is not None


def is_seekable(handles: StreamHandles) -> bool:
    """True if at least one owned direction can seek."""
    return any(direction_is_seekable(d) for d in owned_directions(handles))


def is_fd_based(handles: StreamHandles) -> bool:
    """True if every owned direction exposes a file descriptor."""
    return all(direction_is_fd_based(d) for d in owned_directions(handles))
