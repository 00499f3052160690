import array

import pytest

from iofacade import (
    StreamAdapter,
    StreamIOError,
    TypeMismatchError,
    UnsupportedOperationError,
    default_config,
)
from tests.iofacade.backends import (
    BufferedMemoryOutputStream,
    FailingFlushOutputStream,
    FailingOutputStream,
    MemoryInputStream,
    MemoryOutputStream,
    StuckOutputStream,
    UnflushableOutputStream,
)


class TestWrite:
    def test_write(self):
        stream = MemoryOutputStream()
        adapter = StreamAdapter(stream)
        assert adapter.write(b"hello") == 5
        assert adapter.write(bytearray(b" world")) == 6
        assert stream.data == b"hello world"

    def test_write_retries_partial_writes(self):
        stream = MemoryOutputStream(max_chunk=3)
        adapter = StreamAdapter(stream)
        assert adapter.write(b"0123456789") == 10
        assert stream.data == b"0123456789"
        assert stream.writes == [b"012", b"345", b"678", b"9"]

    def test_write_empty_makes_no_call(self):
        stream = MemoryOutputStream()
        adapter = StreamAdapter(stream)
        assert adapter.write(b"") == 0
        assert adapter.write(memoryview(b"")) == 0
        assert stream.write_calls == 0

    def test_write_memoryview_of_other_format(self):
        stream = MemoryOutputStream()
        adapter = StreamAdapter(stream)
        values = array.array("H", [1, 2])
        assert adapter.write(values) == 4
        assert stream.data == values.tobytes()

    @pytest.mark.parametrize("data", ["text", 42, None, [b"a"]], ids=repr)
    def test_write_non_bytes(self, data):
        stream = MemoryOutputStream()
        adapter = StreamAdapter(stream)
        with pytest.raises(TypeMismatchError):
            adapter.write(data)
        assert stream.write_calls == 0

    def test_write_error_midway(self):
        stream = FailingOutputStream(fail_after=4, max_chunk=2)
        adapter = StreamAdapter(stream)
        with pytest.raises(StreamIOError, match="Error writing to stream"):
            adapter.write(b"0123456789")
        assert stream.data == b"0123"

    def test_write_without_progress(self):
        adapter = StreamAdapter(StuckOutputStream())
        with pytest.raises(StreamIOError):
            adapter.write(b"abc")

    def test_write_on_input_only_stream(self):
        adapter = StreamAdapter(MemoryInputStream(b""))
        with pytest.raises(UnsupportedOperationError, match="not writable"):
            adapter.write(b"abc")
        with pytest.raises(UnsupportedOperationError):
            adapter.write(b"")


class TestWritelines:
    def test_writelines_adds_no_separators(self):
        stream = MemoryOutputStream()
        adapter = StreamAdapter(stream)
        adapter.writelines([b"a\n", b"b", bytearray(b"c\n"), memoryview(b"d")])
        assert stream.data == b"a\nbc\nd"

    def test_writelines_coalesces_small_items(self):
        stream = MemoryOutputStream()
        adapter = StreamAdapter(stream)
        adapter.writelines([b"line %d\n" % i for i in range(10)])
        assert stream.write_calls == 1
        assert stream.data == b"".join(b"line %d\n" % i for i in range(10))

    def test_writelines_flushes_full_chunks(self):
        stream = BufferedMemoryOutputStream(buffer_size=4)
        adapter = StreamAdapter(stream)
        adapter.writelines([b"abc", b"defghij", b"", b"k"])
        assert stream.writes == [b"abcd", b"efgh", b"ijk"]
        assert stream.data == b"abcdefghijk"

    def test_writelines_uses_default_buffer_size(self):
        stream = MemoryOutputStream()
        with default_config(default_buffer_size=5):
            adapter = StreamAdapter(stream)
        adapter.writelines([b"0123456789", b"ab"])
        assert stream.writes == [b"01234", b"56789", b"ab"]

    def test_writelines_with_partial_writes(self):
        stream = BufferedMemoryOutputStream(buffer_size=6, max_chunk=4)
        adapter = StreamAdapter(stream)
        adapter.writelines(iter([b"0123456789"]))
        assert stream.writes == [b"0123", b"45", b"6789"]

    def test_writelines_empty(self):
        stream = MemoryOutputStream()
        adapter = StreamAdapter(stream)
        adapter.writelines([])
        assert stream.write_calls == 0

    def test_writelines_bad_item_aborts(self):
        stream = BufferedMemoryOutputStream(buffer_size=4)
        adapter = StreamAdapter(stream)

        consumed = []

        def items():
            for item in [b"abcdef", "not bytes", b"never"]:
                consumed.append(item)
                yield item

        with pytest.raises(TypeMismatchError):
            adapter.writelines(items())
        # The full chunk was written, the staged remainder was not.
        assert stream.data == b"abcd"
        assert consumed == [b"abcdef", "not bytes"]

    def test_writelines_on_input_only_stream(self):
        adapter = StreamAdapter(MemoryInputStream(b""))
        with pytest.raises(UnsupportedOperationError):
            adapter.writelines([b"abc"])


class TestFlush:
    def test_flush(self):
        stream = MemoryOutputStream()
        adapter = StreamAdapter(stream)
        adapter.flush()
        assert stream.flush_calls == 1

    def test_flush_on_input_only_stream(self):
        adapter = StreamAdapter(MemoryInputStream(b""))
        assert adapter.flush() is None

    def test_flush_unsupported_is_ignored(self):
        adapter = StreamAdapter(UnflushableOutputStream())
        assert adapter.flush() is None

    def test_flush_error(self):
        adapter = StreamAdapter(FailingFlushOutputStream())
        with pytest.raises(StreamIOError, match="Error flushing stream"):
            adapter.flush()

    def test_close_does_not_flush(self):
        stream = MemoryOutputStream()
        adapter = StreamAdapter(stream)
        adapter.close()
        assert stream.flush_calls == 0
