"""Recursive chunkers built on the character chunker.

Text is split on the coarsest separator it contains; any piece that is
still too large is split again with the finer separators that follow.
"""

from .character import CharacterChunker


class RecursiveCharacterChunker(CharacterChunker):
    """Splits on paragraphs, then lines, sentences and words, then characters.

    Pieces that fit are packed with overlap. An oversized piece is handed to
    the next separator in the list; once none is left it is cut into fixed
    windows of ``chunk_size`` stepping by ``chunk_size - chunk_overlap``.

    Attributes:
        separators: Separators from coarsest to finest; ``""`` means characters
    """

    DEFAULT_SEPARATORS = ["\n\n", "\n", ". ", "! ", "? ", " ", ""]

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separators: list[str] | None = None,
        keep_separator: bool = True,
    ):
        separators = separators if separators else list(self.DEFAULT_SEPARATORS)
        super().__init__(chunk_size, chunk_overlap, separators[0], keep_separator)
        self.separators = separators

    def split_text(self, text: str) -> list[str]:
        return self._split_recursive(text, self.separators)

    @staticmethod
    def _pick_separator(text: str, separators: list[str]) -> tuple[str, list[str]]:
        """First separator present in ``text`` and the finer ones after it."""
        for i, candidate in enumerate(separators):
            if candidate == "":
                return candidate, []
            if candidate in text:
                return candidate, separators[i + 1:]
        return separators[-1], []

    def _split_recursive(self, text: str, separators: list[str]) -> list[str]:
        separator, finer = self._pick_separator(text, separators)
        merge_separator = self._merge_separator(separator)

        chunks: list[str] = []
        pending: list[str] = []
        for piece in self._split_by_separator(text, separator):
            if self._length(piece) <= self.chunk_size:
                pending.append(piece)
                continue

            if pending:
                chunks.extend(self._merge_splits(pending, merge_separator))
                pending = []
            if finer:
                chunks.extend(self._split_recursive(piece, finer))
            else:
                chunks.extend(self._windows(piece))

        if pending:
            chunks.extend(self._merge_splits(pending, merge_separator))
        return chunks

    def _windows(self, text: str) -> list[str]:
        step = self.chunk_size - self.chunk_overlap
        windows = []
        for start in range(0, len(text), step):
            windows.append(text[start:start + self.chunk_size])
            if start + self.chunk_size >= len(text):
                break
        return windows


class SemanticChunker(RecursiveCharacterChunker):
    """Recursive chunking that also breaks on clauses, for conversational text."""

    DEFAULT_SEPARATORS = ["\n\n", "\n", ". ", "! ", "? ", "; ", ", ", " ", ""]
