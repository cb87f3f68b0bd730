"""Markdown-aware chunker."""

from .recursive_character import RecursiveCharacterChunker


class MarkdownChunker(RecursiveCharacterChunker):
    """Recursive chunking over markdown structure.

    Headings, fences and horizontal rules are tried before paragraphs and
    lines. Separators stay at the start of the following piece so a heading
    opens the chunk it belongs to.
    """

    SEPARATOR_POSITION = "start"

    DEFAULT_SEPARATORS = [
        "\n# ",
        "\n## ",
        "\n### ",
        "\n#### ",
        "\n##### ",
        "\n###### ",
        "\n```\n",
        "\n\n***\n\n",
        "\n\n---\n\n",
        "\n\n___\n\n",
        "\n\n",
        "\n",
        " ",
        "",
    ]
