import os

import pytest

from iofacade import StreamAdapter, UnsupportedOperationError
from tests.iofacade.backends import (
    FdInputStream,
    FdOutputStream,
    MemoryInputStream,
    MemoryIOStream,
    MemoryOutputStream,
)


@pytest.fixture
def pipe_fds():
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    os.close(read_fd)
    os.close(write_fd)


def test_fileno_input(pipe_fds):
    read_fd, _ = pipe_fds
    adapter = StreamAdapter(FdInputStream(b"", fd=read_fd))
    assert adapter.fileno() == read_fd
    assert not adapter.isatty()


def test_fileno_output(pipe_fds):
    _, write_fd = pipe_fds
    adapter = StreamAdapter(FdOutputStream(fd=write_fd))
    assert adapter.fileno() == write_fd
    assert not adapter.isatty()


def test_fileno_combined_uses_output_descriptor(pipe_fds):
    read_fd, write_fd = pipe_fds
    stream = MemoryIOStream(FdInputStream(b"", fd=read_fd), FdOutputStream(fd=write_fd))
    assert StreamAdapter(stream).fileno() == write_fd


@pytest.mark.parametrize(
    "make_stream",
    [
        lambda: MemoryInputStream(b""),
        lambda: MemoryOutputStream(),
        lambda: MemoryIOStream(FdInputStream(b"", fd=0), MemoryOutputStream()),
        lambda: MemoryIOStream(MemoryInputStream(b""), FdOutputStream(fd=1)),
    ],
    ids=["input", "output", "input-fd-only", "output-fd-only"],
)
def test_not_fd_based(make_stream):
    adapter = StreamAdapter(make_stream())
    with pytest.raises(UnsupportedOperationError, match="fileno"):
        adapter.fileno()
    assert adapter.isatty() is False


def test_isatty_queries_descriptor(monkeypatch: pytest.MonkeyPatch):
    checked = []

    def fake_isatty(fd: int) -> bool:
        checked.append(fd)
        return True

    monkeypatch.setattr(os, "isatty", fake_isatty)
    adapter = StreamAdapter(FdInputStream(b"", fd=42))
    assert adapter.isatty() is True
    assert checked == [42]
