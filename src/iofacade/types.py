"""Protocol definitions for the streams wrapped by :class:`StreamAdapter`."""

import io
import sys
from enum import IntEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from typing_extensions import Buffer

if TYPE_CHECKING:
    from enum import StrEnum
elif sys.version_info >= (3, 11):
    from enum import StrEnum
else:
    from backports.strenum import StrEnum


class StreamShape(StrEnum):
    """The direction(s) a wrapped stream exposes."""

    INPUT = "input"
    OUTPUT = "output"
    COMBINED = "combined"


class Whence(IntEnum):
    """Reference point for :meth:`StreamAdapter.seek`."""

    SET = io.SEEK_SET
    CUR = io.SEEK_CUR
    END = io.SEEK_END


@runtime_checkable
class InputStream(Protocol):
    """A stream that bytes can be read from.

    ``read()`` may return fewer bytes than requested; an empty result means
    the end of the stream was reached.
    """

    def read(self, count: int, /) -> bytes: ...

    def close(self) -> None: ...

    def is_closed(self) -> bool: ...


@runtime_checkable
class OutputStream(Protocol):
    """A stream that bytes can be written to.

    ``write()`` may accept fewer bytes than it was given and returns how many
    it took.
    """

    def write(self, data: Buffer, /) -> int: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...

    def is_closed(self) -> bool: ...


@runtime_checkable
class IOStream(Protocol):
    """A bidirectional stream whose two ends are closed together."""

    def get_input_stream(self) -> InputStream: ...

    def get_output_stream(self) -> OutputStream: ...

    def close(self) -> None: ...

    def is_closed(self) -> bool: ...


@runtime_checkable
class Seekable(Protocol):
    def tell(self) -> int: ...

    def can_seek(self) -> bool: ...

    def seek(self, offset: int, whence: int, /) -> object: ...

    def can_truncate(self) -> bool: ...

    def truncate(self, size: int, /) -> object: ...


@runtime_checkable
class FileDescriptorBased(Protocol):
    def get_fd(self) -> int: ...


@runtime_checkable
class BufferSized(Protocol):
    def get_buffer_size(self) -> int: ...
