import pytest


class ChunkedStream:
    """Binary stream that hands out at most ``chunk`` bytes per read."""

    def __init__(self, data: bytes, chunk: int = 1):
        self._data = data
        self._offset = 0
        self._chunk = chunk
        self.reads = 0
        self.sizes = []

    def read(self, size=-1):
        self.reads += 1
        self.sizes.append(size)
        if size is None or size < 0:
            size = len(self._data) - self._offset
        size = min(size, self._chunk)
        data = self._data[self._offset:self._offset + size]
        self._offset += len(data)
        return data


@pytest.fixture
def chunked():
    """Factory for streams that only return a few bytes per read."""
    return ChunkedStream
