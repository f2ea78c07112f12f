"""
Response accumulation for the generation phase.
Echoes text fragments live and builds the full response text.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from loguru import logger

from aicoder.core.frames import Frame

OutputSink = Callable[[str], None]


@dataclass
class GenerationOutcome:
    """Result of one generation phase."""
    text: str
    completed: bool
    error: Optional[str] = None
    fragments: int = 0

    @property
    def failed(self) -> bool:
        return self.error is not None


class ResponseAccumulator:
    """
    Folds frames into live output and a single response buffer.

    The buffer is owned by the accumulator for one run. Once `consume`
    returns, the text is final.
    """

    def __init__(self, sink: Optional[OutputSink] = None):
        self.sink = sink
        self._parts: List[str] = []
        self._fragments = 0

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def append(self, fragment: str) -> None:
        """Buffer a fragment and emit it to the sink immediately."""
        self._fragments += 1
        if not fragment:
            return
        self._parts.append(fragment)
        if self.sink is not None:
            self.sink(fragment)

    def consume(self, frames: Iterable[Frame]) -> GenerationOutcome:
        """
        Consume frames until a completion or error frame ends the phase.

        Text received before an error frame is discarded: a response cut off
        by the provider is not handed to block extraction.
        """
        for frame in frames:
            if frame.is_text:
                self.append(frame.text)
            elif frame.is_done:
                logger.debug(f"Generation complete ({self._fragments} fragments)")
                return GenerationOutcome(
                    text=self.text, completed=True, fragments=self._fragments
                )
            elif frame.is_error:
                logger.error(f"Provider signaled an error: {frame.error}")
                discarded = len(self.text)
                self._parts.clear()
                if discarded:
                    logger.debug(f"Discarded {discarded} chars of partial response")
                return GenerationOutcome(
                    text="", completed=False, error=frame.error, fragments=self._fragments
                )

        logger.warning("Stream ended without a completion signal")
        return GenerationOutcome(text=self.text, completed=False, fragments=self._fragments)
