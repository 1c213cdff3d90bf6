import io

import pytest


class Pipe(io.RawIOBase):
    """Readable stream that cannot seek or report its position."""

    def __init__(self, data: bytes) -> None:
        self._data = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        chunk = self._data.read(len(buffer))
        buffer[: len(chunk)] = chunk
        return len(chunk)


@pytest.fixture
def make_pipe():
    return Pipe
