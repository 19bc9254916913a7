"""Turn source text into a token stream.

The terminals are defined by the lark grammar in `lark/pqlang.lark`.
Whitespace and comments outside of string literals never reach the token
stream. Tokens are plain `lark.Token` objects which carry their line and
column for error reporting.
"""

__all__ = ["tokenize", "render", "token_position", "WORD_TOKENS"]

import lark

import pqlang


# Token types that need a separating space when rendered next to each other
WORD_TOKENS = frozenset(("NAME", "NUMBER"))

_parsers = {}


def tokenize(source):
    """Split source text into tokens.

    Args:
        source: (str) Program text
    Returns:
        (list[lark.Token]) Tokens in source order
    Raises:
        ParseError: On characters that start no token
    """
    parser = _lark_parser("pqlang")
    try:
        tree = parser.parse(source)
    except lark.exceptions.UnexpectedCharacters as err:
        position = pqlang.ast.SourcePosition(start_line=err.line, start_column=err.column)
        raise pqlang.ParseError(f"Unexpected character {err.char!r}", position) from err
    except lark.exceptions.UnexpectedInput as err:
        position = pqlang.ast.SourcePosition(
            start_line=getattr(err, "line", None), start_column=getattr(err, "column", None)
        )
        raise pqlang.ParseError("Could not tokenize program", position) from err
    return list(tree.children)


def render(tokens):
    """Dense text for a token sequence.

    Whitespace is only kept between two word tokens, so `return x` renders
    as written while `x = 1 + 2` renders as `x=1+2`.

    Args:
        tokens: (list[lark.Token]) Tokens to join
    Returns:
        (str) Rendered text
    """
    parts = []
    previous = None
    for token in tokens:
        if previous is not None and previous.type in WORD_TOKENS and token.type in WORD_TOKENS:
            parts.append(" ")
        parts.append(str(token))
        previous = token
    return "".join(parts)


def token_position(token):
    """Source position of a token."""
    if token is None:
        return None
    return pqlang.ast.SourcePosition(
        start_line=token.line,
        start_column=token.column,
        end_line=token.end_line,
        end_column=token.end_column,
    )


def _lark_parser(name):
    """Get globally shared lark parser.

    Args:
        name: (str) name of the grammar file (without .lark)

    Returns:
        (lark.Lark) Parser instance
    """
    parser = _parsers.get(name)
    if parser is not None:
        return parser

    path = f"lark/{name}.lark"
    parser = lark.Lark.open(
        path, rel_to=__file__, parser="lalr", lexer="basic", propagate_positions=True
    )
    _parsers[name] = parser
    return parser
