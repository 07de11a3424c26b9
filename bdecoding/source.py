"""
Byte source with a single byte of pushback.
"""
from typing import BinaryIO, Optional

from .errors import EndOfInput

# Largest single read handed to the stream; buffered files allocate the full
# requested size up front
READ_CHUNK = 65536


class PushbackSource:
    """
    Pull-based reader over a blocking binary stream.

    Only one byte can be pushed back at a time, which is all the lookahead
    the bencode grammar needs.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._pushback: Optional[int] = None
        self.position = 0

    def pop(self) -> int:
        """Consume and return the next byte."""
        if self._pushback is not None:
            value = self._pushback
            self._pushback = None
        else:
            data = self._stream.read(1)
            if not data:
                raise EndOfInput("Unexpected end of input", self.position)
            value = data[0]
        self.position += 1
        return value

    def unread(self, value: int) -> None:
        """Push a byte back so the next pop() returns it again."""
        if self._pushback is not None:
            raise ValueError("Pushback buffer is full")
        self._pushback = value
        self.position -= 1

    def peek(self) -> int:
        """Return the next byte without consuming it."""
        value = self.pop()
        self.unread(value)
        return value

    def at_eof(self) -> bool:
        try:
            self.peek()
        except EndOfInput:
            return True
        return False

    def read_fully(self, length: int) -> bytes:
        """
        Read exactly ``length`` bytes.

        Short reads from the underlying stream are retried until enough data
        arrived or the stream signals end of input.

        Raises:
            EndOfInput: If the stream ends before ``length`` bytes were read.
        """
        if length < 0:
            raise ValueError(f"Negative read length: {length}")

        chunks = []
        remaining = length
        if remaining and self._pushback is not None:
            chunks.append(bytes((self.pop(),)))
            remaining -= 1

        while remaining:
            data = self._stream.read(min(remaining, READ_CHUNK))
            if not data:
                raise EndOfInput(
                    f"Expected {length} bytes, got {length - remaining}", self.position)
            chunks.append(data)
            remaining -= len(data)
            self.position += len(data)

        return b"".join(chunks)

    def skip(self, count: int) -> int:
        """Discard up to ``count`` bytes and return how many were skipped."""
        skipped = 0
        if count > 0 and self._pushback is not None:
            self.pop()
            skipped += 1

        while skipped < count:
            data = self._stream.read(min(count - skipped, READ_CHUNK))
            if not data:
                break
            skipped += len(data)
            self.position += len(data)

        return skipped
