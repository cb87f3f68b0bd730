"""Single-separator character chunker.

Splits on one separator and packs the pieces into chunks. There is no
recursion: a piece longer than ``chunk_size`` becomes its own oversized
chunk.
"""

import re
from typing import Literal

from loguru import logger

from ..base import BaseChunker

SeparatorPosition = Literal["start", "end"]


class CharacterChunker(BaseChunker):
    """Chunks text on a single separator.

    Also provides the separator splitting and overlap-aware merging used by
    the recursive strategies.

    Attributes:
        separator: Separator to split on
        keep_separator: Keep separators inside the pieces (attached at
            ``SEPARATOR_POSITION``); otherwise they are re-inserted on merge
    """

    SEPARATOR_POSITION: SeparatorPosition = "end"

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separator: str = "\n\n",
        keep_separator: bool = True,
    ):
        super().__init__(chunk_size, chunk_overlap)
        self.separator = separator
        self.keep_separator = keep_separator

    def split_text(self, text: str) -> list[str]:
        splits = self._split_by_separator(text, self.separator)
        return self._merge_splits(splits, self._merge_separator(self.separator))

    def _length(self, text: str) -> int:
        return len(text)

    def _merge_separator(self, separator: str) -> str:
        return "" if self.keep_separator else separator

    def _split_by_separator(self, text: str, separator: str) -> list[str]:
        """Split text by a separator, keeping it attached when configured.

        Args:
            text: Text to split
            separator: Separator string (empty means single characters)

        Returns:
            List of split pieces (non-empty)
        """
        if separator == "":
            return list(text)

        if not self.keep_separator:
            return [s for s in text.split(separator) if s]

        parts = re.split(f"({re.escape(separator)})", text)
        if self.SEPARATOR_POSITION == "end":
            pieces = [parts[i] + parts[i + 1] for i in range(0, len(parts) - 1, 2)]
            pieces.append(parts[-1])
        else:
            pieces = [parts[0]]
            pieces.extend(parts[i] + parts[i + 1] for i in range(1, len(parts) - 1, 2))
        return [p for p in pieces if p]

    def _merge_splits(self, splits: list[str], separator: str) -> list[str]:
        """Pack pieces into chunks of at most ``chunk_size``.

        When the next piece would overflow, the current chunk is emitted and
        leading pieces are dropped until the retained tail is within
        ``chunk_overlap`` and the next piece fits.

        Args:
            splits: Pieces, each expected to fit in a chunk
            separator: String placed between pieces when joining

        Returns:
            Merged chunks
        """
        separator_len = self._length(separator)
        chunks: list[str] = []
        current: list[str] = []
        total = 0

        for piece in splits:
            piece_len = self._length(piece)
            joined_len = total + piece_len + (separator_len if current else 0)

            if joined_len > self.chunk_size:
                if total > self.chunk_size:
                    logger.warning(
                        f"Created a chunk of size {total}, which is longer than "
                        f"the specified {self.chunk_size}"
                    )
                if current:
                    self._emit(chunks, current, separator)
                    while total > self.chunk_overlap or (
                        total + piece_len + (separator_len if current else 0) > self.chunk_size
                        and total > 0
                    ):
                        total -= self._length(current[0]) + (separator_len if len(current) > 1 else 0)
                        current.pop(0)

            current.append(piece)
            total += piece_len + (separator_len if len(current) > 1 else 0)

        if current:
            if total > self.chunk_size:
                logger.warning(
                    f"Created a chunk of size {total}, which is longer than "
                    f"the specified {self.chunk_size}"
                )
            self._emit(chunks, current, separator)
        return chunks

    @staticmethod
    def _emit(chunks: list[str], pieces: list[str], separator: str) -> None:
        text = separator.join(pieces)
        if text:
            chunks.append(text)
