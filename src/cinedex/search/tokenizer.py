"""Split query strings into free-text words and ``{...}`` directives."""

from __future__ import annotations

_WHITESPACE = frozenset(" \t\r\n")


def query_tokens(query: str) -> list[str]:
    """Break a query into tokens.

    Tokens are whitespace delimited, except inside curly braces, where
    whitespace is kept and nesting is tracked. ``"a b {x y z} c"`` has
    exactly four tokens: ``a``, ``b``, ``{x y z}`` and ``c``. An unclosed
    brace at the end of the query still yields what was buffered.

    Args:
        query: Raw query text

    Returns:
        Tokens in the order they appear
    """
    tokens: list[str] = []
    buf: list[str] = []
    depth = 0
    for ch in query:
        if ch in _WHITESPACE and depth == 0:
            if buf:
                tokens.append("".join(buf))
                buf = []
        elif ch == "{":
            depth += 1
            buf.append(ch)
        elif ch == "}" and depth > 0:
            depth -= 1
            buf.append(ch)
            if depth == 0:
                tokens.append("".join(buf))
                buf = []
        else:
            buf.append(ch)
    if buf:
        tokens.append("".join(buf))
    return tokens


def directive_parts(token: str) -> tuple[str, str] | None:
    """Split ``{name}`` or ``{name:value}`` into its trimmed name and value.

    Returns ``None`` when the token is free text.
    """
    if len(token) < 3 or token[0] != "{" or token[-1] != "}":
        return None
    name, _, value = token[1:-1].partition(":")
    name, value = name.strip(), value.strip()
    if not name:
        return None
    return name, value
