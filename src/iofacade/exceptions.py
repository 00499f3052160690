import io


# Common base for every error raised by a StreamAdapter
class StreamAdapterError(Exception):
    """Base exception for all stream adapter errors."""

    pass


class TypeMismatchError(StreamAdapterError, TypeError):
    """Raised when an object is not a recognized stream, or an argument is not
    a bytes-like object."""

    pass


class ClosedStreamError(StreamAdapterError, ValueError):
    """Raised when an operation is attempted on a closed stream."""

    def __init__(self, message: str = "I/O operation on closed file"):
        super().__init__(message)


class UnsupportedOperationError(StreamAdapterError, io.UnsupportedOperation):
    """Raised when the wrapped stream lacks the capability an operation needs."""

    pass


class StreamIOError(StreamAdapterError, OSError):
    """Raised when the wrapped stream reports an error."""

    pass


class OutOfMemoryError(StreamAdapterError, MemoryError):
    """Raised when a result buffer cannot be allocated."""

    pass
