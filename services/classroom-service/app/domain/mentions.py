"""Extraction of @-mentioned students from notification text."""

from __future__ import annotations


def parse_mentions(text: str) -> list[str]:
    """Return mentioned identifiers in order of appearance.

    Every whitespace-separated token starting with ``@`` is a mention; exactly one
    leading ``@`` is removed. Duplicates and malformed addresses pass through, so
    ``"@"`` alone yields an empty identifier.
    """
    return [token[1:] for token in text.split() if token.startswith("@") and "@" in token]
