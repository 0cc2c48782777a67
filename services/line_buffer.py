"""Accumulate raw stream bytes and hand out complete text lines."""

from __future__ import annotations

import logging
from typing import List

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINE_BYTES = 64 * 1024


class LineBuffer:
    """Owns the bytes received after the last line terminator.

    Lines are decoded only once complete, so a UTF-8 sequence split across two
    network chunks is reassembled before decoding. A line that outgrows
    ``max_line_bytes`` is dropped whole, including the part that arrives after
    the cap was hit.
    """

    def __init__(self, max_line_bytes: int = DEFAULT_MAX_LINE_BYTES) -> None:
        if max_line_bytes <= 0:
            raise ValueError("max_line_bytes must be positive.")
        self.max_line_bytes = max_line_bytes
        self._pending = bytearray()
        self._discarding = False

    @property
    def pending(self) -> int:
        return len(self._pending)

    @property
    def discarding(self) -> bool:
        return self._discarding

    def feed(self, chunk: bytes) -> List[str]:
        """Append ``chunk`` and return every complete, non-empty trimmed line."""
        self._pending.extend(chunk)
        lines: List[str] = []
        start = 0

        if self._discarding:
            end = self._pending.find(b"\n")
            if end == -1:
                self._pending.clear()
                return lines
            start = end + 1
            self._discarding = False

        while True:
            end = self._pending.find(b"\n", start)
            if end == -1:
                break
            text = self._pending[start:end].decode("utf-8", errors="replace").strip()
            if text:
                lines.append(text)
            start = end + 1

        if start:
            del self._pending[:start]

        if len(self._pending) > self.max_line_bytes:
            logger.warning(
                "Discarding oversized line",
                extra={"line_bytes": len(self._pending)},
            )
            self._pending.clear()
            self._discarding = True

        return lines
