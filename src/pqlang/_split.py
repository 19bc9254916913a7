"""Split token sequences at statement and argument boundaries.

Strings are single tokens, so depth counting over brackets is all that is
needed to find the top level of a sequence.
"""

__all__ = ["split_block", "matching", "split_top", "BLOCK_KEYWORDS"]

import pqlang
from pqlang._lex import render, token_position


# Statements with these leading tokens end at their closing brace
BLOCK_KEYWORDS = frozenset(("while", "for", "fun", "else", "class", "{"))

OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = frozenset(OPENERS.values())


def matching(tokens, start):
    """Find the token closing the bracket opened at `start`.

    Args:
        tokens: (list[lark.Token]) Token sequence
        start: (int) Index of an opening `(`, `[` or `{`
    Returns:
        (int) Index of the matching closer
    Raises:
        ParseError: If the bracket is never closed or closed by the wrong kind
    """
    stack = []
    for index in range(start, len(tokens)):
        text = _punct(tokens[index])
        if text in OPENERS:
            stack.append(OPENERS[text])
        elif text in CLOSERS:
            if not stack or stack.pop() != text:
                raise _unbalanced(tokens, index)
            if not stack:
                return index
    raise pqlang.ParseError(
        f"Missing closing {OPENERS[str(tokens[start])]!r} in: {render(tokens[start:])}",
        token_position(tokens[start]),
    )


def split_top(tokens, sep):
    """Split tokens at separators outside of any brackets.

    Args:
        tokens: (list[lark.Token]) Token sequence
        sep: (str) Separator token text like "," or ";"
    Returns:
        (list[list[lark.Token]]) Pieces between separators, an empty
            input gives a single empty piece
    """
    pieces = [[]]
    depth = 0
    for index, token in enumerate(tokens):
        text = _punct(token)
        if text in OPENERS:
            depth += 1
        elif text in CLOSERS:
            depth -= 1
            if depth < 0:
                raise _unbalanced(tokens, index)
        elif depth == 0 and text == sep:
            pieces.append([])
            continue
        pieces[-1].append(token)
    if depth:
        raise pqlang.ParseError(
            f"Unbalanced brackets in: {render(tokens)}", token_position(tokens[0])
        )
    return pieces


def split_block(tokens):
    """Split the inside of a block into statements.

    A statement ends at a top level `;`. Statements starting with a block
    keyword also end at their top level `}`, and so does an `if` unless
    the brace is followed by `else`.

    Class declarations are moved to the front, followed by function
    declarations, followed by everything else in source order.

    Args:
        tokens: (list[lark.Token]) Tokens between the block braces
    Returns:
        (list[list[lark.Token]]) Non-empty statements
    """
    statements = []
    current = []
    depth = 0
    for index, token in enumerate(tokens):
        text = _punct(token)
        if depth == 0 and text == ";":
            _finish(statements, current)
            current = []
            continue

        current.append(token)
        if text in OPENERS:
            depth += 1
        elif text in CLOSERS:
            depth -= 1
            if depth < 0:
                raise _unbalanced(tokens, index)
            if depth == 0 and text == "}" and _ends_here(current, tokens, index):
                _finish(statements, current)
                current = []

    if depth:
        raise pqlang.ParseError(
            f"Unbalanced brackets in: {render(current)}", token_position(current[0])
        )
    _finish(statements, current)

    classes = [s for s in statements if _leading(s) == "class"]
    funcs = [s for s in statements if _leading(s) == "fun"]
    rest = [s for s in statements if _leading(s) not in ("class", "fun")]
    return classes + funcs + rest


def _ends_here(current, tokens, index):
    first = _leading(current)
    if first in BLOCK_KEYWORDS:
        return True
    if first == "if":
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        return following is None or str(following) != "else"
    return False


def _finish(statements, current):
    if current:
        statements.append(current)


def _leading(statement):
    token = statement[0]
    if token.type in ("NAME", "PUNCT"):
        return str(token)
    return None


def _punct(token):
    return str(token) if token.type == "PUNCT" else None


def _unbalanced(tokens, index):
    return pqlang.ParseError(
        f"Unexpected {str(tokens[index])!r} in: {render(tokens)}", token_position(tokens[index])
    )
