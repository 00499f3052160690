"""Translation of errors raised by wrapped streams into iofacade exceptions."""

import logging
from typing import Callable, NoReturn, Optional, TypeVar

from iofacade.exceptions import OutOfMemoryError, StreamAdapterError, StreamIOError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def translate_stream_error(e: Exception) -> Optional[StreamAdapterError]:
    """Map an exception raised by a wrapped stream to a StreamAdapterError.

    Returns None for exceptions that are already StreamAdapterErrors, which
    should be propagated unchanged.
    """
    if isinstance(e, StreamAdapterError):
        return None
    if isinstance(e, MemoryError):
        return OutOfMemoryError(str(e) or "out of memory")
    return StreamIOError(str(e) or type(e).__name__)


def raise_translated(
    e: Exception,
    exception_translator: Callable[
        [Exception], Optional[StreamAdapterError]
    ] = translate_stream_error,
) -> NoReturn:
    translated = exception_translator(e)
    if translated is not None:
        logger.debug("Translated exception: %r -> %r", e, translated)
        raise translated from e
    raise e


def run_with_exception_translation(
    func: Callable[[], T],
    exception_translator: Callable[
        [Exception], Optional[StreamAdapterError]
    ] = translate_stream_error,
) -> T:
    try:
        return func()
    except Exception as e:  # noqa: BLE001
        # Any exception raised by the wrapped stream is a transport failure from
        # the caller's point of view, so all of them are translated here.
        raise_translated(e, exception_translator)
