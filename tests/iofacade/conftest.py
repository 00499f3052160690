import pytest

from iofacade import StreamAdapter
from tests.iofacade.backends import (
    MemoryInputStream,
    MemoryIOStream,
    MemoryOutputStream,
    SeekableMemoryInputStream,
    SeekableMemoryOutputStream,
)

DATA = b"0123456789abcdefghijklmnopqrstuvwxyz"


@pytest.fixture
def input_stream() -> MemoryInputStream:
    return MemoryInputStream(DATA)


@pytest.fixture
def output_stream() -> MemoryOutputStream:
    return MemoryOutputStream()


@pytest.fixture
def combined_stream() -> MemoryIOStream:
    return MemoryIOStream(
        SeekableMemoryInputStream(DATA), SeekableMemoryOutputStream()
    )


@pytest.fixture(params=["input", "output", "combined"])
def any_adapter(
    request: pytest.FixtureRequest,
    input_stream: MemoryInputStream,
    output_stream: MemoryOutputStream,
    combined_stream: MemoryIOStream,
) -> StreamAdapter:
    stream = {
        "input": input_stream,
        "output": output_stream,
        "combined": combined_stream,
    }[request.param]
    return StreamAdapter(stream)
