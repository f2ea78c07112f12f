"""
Frame decoding for newline-delimited JSON generation streams.

The server sends one JSON object per line:

    {"response": "Hel", "done": false}
    {"response": "lo", "done": false}
    {"response": "", "done": true}

Chunk boundaries from the transport rarely line up with those lines, so the
decoder keeps the undecoded bytes in a pending buffer and only emits a frame
once a complete, newline-terminated object is available.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from loguru import logger

from aicoder.core.errors import DecodeError

LINE_TERMINATOR = b"\n"


class FrameKind(Enum):
    TEXT = "text"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class Frame:
    """One decoded unit of the stream: a text fragment, completion, or error."""
    kind: FrameKind
    text: str = ""
    error: Optional[str] = None

    @classmethod
    def text_fragment(cls, text: str) -> "Frame":
        return cls(FrameKind.TEXT, text=text)

    @classmethod
    def completion(cls) -> "Frame":
        return cls(FrameKind.DONE)

    @classmethod
    def failure(cls, message: str) -> "Frame":
        return cls(FrameKind.ERROR, error=message)

    @property
    def is_text(self) -> bool:
        return self.kind is FrameKind.TEXT

    @property
    def is_done(self) -> bool:
        return self.kind is FrameKind.DONE

    @property
    def is_error(self) -> bool:
        return self.kind is FrameKind.ERROR


class _Malformed(ValueError):
    pass


def _parse_record(data: bytes) -> List[Frame]:
    """
    Parse one complete JSON record into frames.

    Raises:
        _Malformed: If the bytes are not a JSON object with the expected fields
    """
    try:
        record = json.loads(data)
    except (ValueError, UnicodeDecodeError) as e:
        raise _Malformed(str(e)) from e

    if not isinstance(record, dict):
        raise _Malformed(f"expected a JSON object, got {type(record).__name__}")

    response = record.get("response", "")
    done = record.get("done", False)
    error = record.get("error")

    if response is None:
        response = ""
    if not isinstance(response, str):
        raise _Malformed("field 'response' must be a string")
    if not isinstance(done, bool):
        raise _Malformed("field 'done' must be a boolean")
    if error is not None and not isinstance(error, str):
        raise _Malformed("field 'error' must be a string")

    if error:
        return [Frame.failure(error)]

    frames = [Frame.text_fragment(response)]
    if done:
        frames.append(Frame.completion())
    return frames


class FrameDecoder:
    """
    Incremental decoder from raw byte chunks to frames.

    Usage:
        decoder = FrameDecoder()
        for chunk in body:
            for frame in decoder.feed(chunk):
                ...
        for frame in decoder.finish():
            ...

    A line that does not parse is kept in the buffer rather than dropped. The
    next terminator retries with the longer prefix, so a record that spans
    several physical lines still decodes once it is complete. Only at end of
    stream is an unparseable remainder an error.
    """

    def __init__(self):
        self._pending = bytearray()
        # Bytes of _pending already known not to end a complete record
        self._scanned = 0
        self._finished = False

    @property
    def pending(self) -> bytes:
        """Bytes buffered but not yet decoded into frames."""
        return bytes(self._pending)

    @property
    def finished(self) -> bool:
        """True once a completion or error frame has been produced."""
        return self._finished

    def feed(self, chunk: bytes) -> List[Frame]:
        """
        Append a chunk and return every frame it completes.

        Once a completion or error frame has been produced the decoder is
        finished and further chunks are ignored.
        """
        if not chunk or self._finished:
            return []

        self._pending.extend(chunk)
        frames: List[Frame] = []

        while not self._finished:
            pos = self._pending.find(LINE_TERMINATOR, self._scanned)
            if pos < 0:
                break

            end = pos + 1
            candidate = bytes(self._pending[:end])

            if not candidate.strip():
                del self._pending[:end]
                self._scanned = 0
                continue

            try:
                parsed = _parse_record(candidate)
            except _Malformed as e:
                logger.debug(f"Incomplete frame ({len(candidate)} bytes), waiting for more input: {e}")
                self._scanned = end
                continue

            del self._pending[:end]
            self._scanned = 0
            frames.extend(self._accept(parsed))

        return frames

    def finish(self) -> List[Frame]:
        """
        Signal end of stream and decode any unterminated remainder.

        Raises:
            DecodeError: If the remaining bytes are not a valid frame
        """
        if self._finished or not self._pending.strip():
            self._pending.clear()
            self._scanned = 0
            return []

        remainder = bytes(self._pending)
        try:
            parsed = _parse_record(remainder)
        except _Malformed as e:
            raise DecodeError(f"invalid frame at end of stream: {e}", data=remainder) from e

        self._pending.clear()
        self._scanned = 0
        return self._accept(parsed)

    def _accept(self, parsed: List[Frame]) -> List[Frame]:
        if any(frame.is_done or frame.is_error for frame in parsed):
            self._finished = True
        return parsed


def iter_frames(chunks: Iterable[bytes]) -> Iterator[Frame]:
    """
    Decode a chunk iterable into frames, in arrival order.

    Stops pulling chunks as soon as a completion or error frame is produced.

    Raises:
        DecodeError: If the stream ends on a malformed frame
    """
    decoder = FrameDecoder()

    for chunk in chunks:
        yield from decoder.feed(chunk)
        if decoder.finished:
            return

    yield from decoder.finish()
