"""Result snippets around the first query match"""

from typing import Iterable


def generate_snippet(
    content: str,
    query_tokens: Iterable[str],
    snippet_length: int = 150,
    context_before: int = 50,
) -> str:
    """
    Cut a window of `snippet_length` chars starting `context_before` chars
    before the earliest occurrence of any query token (case-insensitive).

    Falls back to the leading `snippet_length` chars when nothing matches.
    Truncation on either side is marked with "...".
    """
    if not content:
        return ""

    lower_content = content.lower()
    best_position = -1
    for token in query_tokens:
        if not token:
            continue
        pos = lower_content.find(token.lower())
        if pos != -1 and (best_position == -1 or pos < best_position):
            best_position = pos

    if best_position == -1:
        return content[:snippet_length] + ("..." if len(content) > snippet_length else "")

    start = max(0, best_position - context_before)
    end = min(len(content), start + snippet_length)
    snippet = content[start:end]

    if start > 0:
        snippet = "..." + snippet
    if end < len(content):
        snippet = snippet + "..."
    return snippet
