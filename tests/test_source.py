import io

import pytest
from bdecoding.errors import EndOfInput
from bdecoding.source import READ_CHUNK, PushbackSource


def test_pop_returns_bytes_in_order():
    source = PushbackSource(io.BytesIO(b'ab'))
    assert source.pop() == ord('a')
    assert source.pop() == ord('b')

def test_pop_at_end_raises():
    source = PushbackSource(io.BytesIO(b''))
    with pytest.raises(EndOfInput):
        source.pop()

def test_end_of_input_is_eof_error():
    source = PushbackSource(io.BytesIO(b''))
    with pytest.raises(EOFError):
        source.pop()

def test_peek_does_not_advance():
    source = PushbackSource(io.BytesIO(b'xy'))
    assert source.peek() == ord('x')
    assert source.peek() == ord('x')
    assert source.position == 0
    assert source.pop() == ord('x')
    assert source.position == 1

def test_unread_twice_is_rejected():
    source = PushbackSource(io.BytesIO(b'xy'))
    source.unread(source.pop())
    with pytest.raises(ValueError):
        source.unread(ord('z'))

def test_at_eof():
    source = PushbackSource(io.BytesIO(b'x'))
    assert not source.at_eof()
    source.pop()
    assert source.at_eof()

# --- Bulk reads ---

def test_read_fully_includes_pushed_back_byte():
    source = PushbackSource(io.BytesIO(b'hello'))
    source.peek()
    assert source.read_fully(5) == b'hello'
    assert source.position == 5

def test_read_fully_retries_short_reads(chunked):
    stream = chunked(b'0123456789', chunk=3)
    source = PushbackSource(stream)
    assert source.read_fully(10) == b'0123456789'
    assert stream.reads >= 4

def test_read_fully_short_stream_raises(chunked):
    source = PushbackSource(chunked(b'abc', chunk=2))
    with pytest.raises(EndOfInput) as excinfo:
        source.read_fully(5)
    assert "got 3" in str(excinfo.value)

def test_read_fully_zero_length():
    source = PushbackSource(io.BytesIO(b'abc'))
    assert source.read_fully(0) == b''
    assert source.position == 0

def test_read_fully_negative_length():
    source = PushbackSource(io.BytesIO(b'abc'))
    with pytest.raises(ValueError):
        source.read_fully(-1)

def test_skip_stops_at_end(chunked):
    source = PushbackSource(chunked(b'abcdef', chunk=2))
    source.peek()
    assert source.skip(4) == 4
    assert source.pop() == ord('e')
    assert source.skip(10) == 1

def test_reads_are_capped(chunked):
    stream = chunked(b'x' * 10, chunk=10)
    source = PushbackSource(stream)
    with pytest.raises(EndOfInput):
        source.read_fully(10 ** 20)
    assert max(stream.sizes) == READ_CHUNK
    assert source.skip(10 ** 20) == 0
    assert max(stream.sizes) == READ_CHUNK

# --- File-backed streams ---

@pytest.fixture
def data_file(tmp_path):
    def write(data: bytes):
        path = tmp_path / 'data.bin'
        path.write_bytes(data)
        return open(path, 'rb')
    return write


def test_file_read_fully(data_file):
    with data_file(b'a' * (READ_CHUNK + 10)) as f:
        source = PushbackSource(f)
        assert source.read_fully(READ_CHUNK + 10) == b'a' * (READ_CHUNK + 10)
        assert source.at_eof()

def test_file_read_fully_truncated(data_file):
    with data_file(b'abc') as f:
        source = PushbackSource(f)
        with pytest.raises(EndOfInput) as excinfo:
            source.read_fully(5)
        assert excinfo.value.position == 3

@pytest.mark.parametrize('length', [999999999999999, 99999999999999999999])
def test_file_read_fully_huge_length(data_file, length):
    with data_file(b'abc') as f:
        source = PushbackSource(f)
        with pytest.raises(EndOfInput):
            source.read_fully(length)

def test_file_skip_stops_at_end(data_file):
    with data_file(b'abcdef') as f:
        source = PushbackSource(f)
        assert source.skip(2) == 2
        assert source.pop() == ord('c')
        assert source.skip(10 ** 20) == 3
        assert source.position == 6
        assert source.at_eof()
