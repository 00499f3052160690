from typing import Any

from iofacade.capabilities import (
    Combined,
    InputOnly,
    OutputOnly,
    StreamHandles,
    StreamProbe,
    probe_stream,
)
from iofacade.config import (
    AdapterConfig,
    default_config,
    get_default_config,
    set_default_config,
    set_default_config_fields,
)
from iofacade.exceptions import (
    ClosedStreamError,
    OutOfMemoryError,
    StreamAdapterError,
    StreamIOError,
    TypeMismatchError,
    UnsupportedOperationError,
)
from iofacade.stream_adapter import StreamAdapter
from iofacade.types import (
    BufferSized,
    FileDescriptorBased,
    InputStream,
    IOStream,
    OutputStream,
    Seekable,
    StreamShape,
    Whence,
)


def wrap(stream: Any, **kwargs: Any) -> StreamAdapter:
    """Wrap ``stream`` as a file object, unless it already is a StreamAdapter.

    Keyword arguments are passed to :class:`StreamAdapter`.
    """
    if isinstance(stream, StreamAdapter):
        return stream
    return StreamAdapter(stream, **kwargs)


__all__ = [
    # Core
    "StreamAdapter",
    "wrap",
    # Classification
    "StreamShape",
    "StreamHandles",
    "StreamProbe",
    "InputOnly",
    "OutputOnly",
    "Combined",
    "probe_stream",
    # Stream protocols
    "InputStream",
    "OutputStream",
    "IOStream",
    "Seekable",
    "FileDescriptorBased",
    "BufferSized",
    "Whence",
    # Config
    "AdapterConfig",
    "default_config",
    "get_default_config",
    "set_default_config",
    "set_default_config_fields",
    # Exceptions
    "StreamAdapterError",
    "TypeMismatchError",
    "ClosedStreamError",
    "UnsupportedOperationError",
    "StreamIOError",
    "OutOfMemoryError",
]

__version__ = "0.1.0"
