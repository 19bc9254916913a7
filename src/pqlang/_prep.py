"""Prepare source text for the statement parser.

Comments and whitespace are already gone once the source is tokenized. What
remains here is consuming the leading `import` directives.
"""

__all__ = ["preprocess", "Prepared"]

from dataclasses import dataclass, field

import pqlang
from pqlang._lex import render, token_position, tokenize


@dataclass
class Prepared:
    """Program ready for parsing.

    Attributes:
        text: Dense rendering of the program tokens
        tokens: Program tokens, import directives removed
        imports: Imported library names in order, without duplicates
    """

    text: str
    tokens: list
    imports: list = field(default_factory=list)


def preprocess(source):
    """Tokenize source and collect its leading import directives.

    A directive is `import name;` where the name is an identifier or a
    relative path of identifiers joined with `/`.

    Args:
        source: (str) Program text
    Returns:
        (Prepared) Remaining tokens and the import names
    Raises:
        ParseError: For malformed directives or unknown characters
    """
    tokens = tokenize(source)
    imports = []
    pos = 0
    while pos < len(tokens) and _is_word(tokens[pos], "import"):
        name, pos = _import_name(tokens, pos + 1)
        if name not in imports:
            imports.append(name)

    tokens = tokens[pos:]
    return Prepared(render(tokens), tokens, imports)


def _import_name(tokens, pos):
    """Consume `name(/name)*;` and return the name and next position."""
    start = pos - 1
    parts = []
    while True:
        if pos >= len(tokens) or tokens[pos].type != "NAME":
            break
        parts.append(str(tokens[pos]))
        pos += 1
        if pos < len(tokens) and str(tokens[pos]) == "/":
            pos += 1
            continue
        if pos < len(tokens) and str(tokens[pos]) == ";":
            return "/".join(parts), pos + 1
        break

    text = render(tokens[start:pos + 1])
    position = token_position(tokens[min(pos, len(tokens) - 1)])
    raise pqlang.ParseError(f"Invalid import directive: {text}", position)


def _is_word(token, word):
    return token.type == "NAME" and str(token) == word
