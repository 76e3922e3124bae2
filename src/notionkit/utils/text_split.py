"""Character-limit aware string splitting.

Notion limits ``rich_text[].text.content`` to 2 000 characters per run.
:func:`split_string` partitions a string into chunks of at most *limit*
characters.  Python ``str`` indexing is code-point based, so a slice never
cuts a multi-byte character in half.
"""

from __future__ import annotations


def split_string(text: str, limit: int = 2000, *, prefer_whitespace: bool = False) -> list[str]:
    """Split *text* into chunks of at most *limit* characters.

    Parameters
    ----------
    text:
        The input string to partition.
    limit:
        Maximum number of characters per chunk.
    prefer_whitespace:
        End each chunk after the last whitespace inside the window when
        there is one, so words are not split.  Falls back to a hard cut.

    Returns
    -------
    list[str]
        Non-empty chunks whose concatenation equals *text*.  An empty
        *text* yields ``[]``.

    Raises
    ------
    ValueError
        If *limit* is less than 1.

    Examples
    --------
    >>> split_string("hello world", 5)
    ['hello', ' worl', 'd']

    >>> split_string("hello world", 8, prefer_whitespace=True)
    ['hello ', 'world']
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    chunks: list[str] = []
    start = 0
    while start < len(text):
        end = min(start + limit, len(text))
        if prefer_whitespace and end < len(text):
            window = text[start:end]
            cut = max(window.rfind(" "), window.rfind("\n"), window.rfind("\t"))
            if cut > 0:
                end = start + cut + 1
        chunks.append(text[start:end])
        start = end
    return chunks
