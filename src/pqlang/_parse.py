"""Parse PQLang source into ast nodes.

The source is tokenized by lark, everything above the token level is
recursive descent over token lists. A block is split into statements, each
statement is dispatched by its leading keyword, then checked for a top
level assignment, and finally parsed by the operator precedence ladder.

Every node produced for a statement carries the source position of the
statement's first token.
"""

__all__ = [
    "parse",
    "parse_expr",
    "parse_block",
    "parse_statement",
    "KEYWORDS",
]

import contextvars
import itertools
import logging
from contextlib import contextmanager

import pqlang
from pqlang import ast
from pqlang._lex import render, token_position, tokenize
from pqlang._prep import preprocess
from pqlang._split import matching, split_block, split_top


log = logging.getLogger(__name__)

KEYWORDS = frozenset((
    "true", "false", "while", "fun", "if", "else", "print", "sqrt", "for",
    "floor", "ceil", "break", "return", "class", "new", "type", "error", "read",
))

# Operator levels of the precedence ladder, lowest precedence first
LEVELS = (
    ("||",),
    ("&&",),
    ("==", "!="),
    ("<", ">", "<=", ">="),
    ("+", "-"),
    ("*", "/", "%"),
)
ADDITIVE = LEVELS.index(("+", "-"))

ASSIGN_OPS = ("=", "+=", "-=", "*=", "/=")
STEP_OPS = ("++", "--")
PREFIX_OPS = ("!", "-", "+")
PREFIX_WORDS = ("sqrt", "floor", "ceil")

# Statements dispatched on their leading token
BLOCK_FORMS = frozenset(("{", "while", "for", "if", "fun", "class"))

# Names that can start an expression but never end an operand
_NOT_OPERANDS = frozenset(PREFIX_WORDS + ("new", "print", "error", "return"))

# Hidden countdown counters are numbered per parse
_countdowns = contextvars.ContextVar("countdowns", default=None)


@contextmanager
def _numbering():
    if _countdowns.get() is not None:
        yield
        return
    token = _countdowns.set(itertools.count())
    try:
        yield
    finally:
        _countdowns.reset(token)


def parse(source, loader=None):
    """Parse a complete program.

    Leading `import` directives are resolved through the loader. Only the
    class and function declarations of a library are kept, they are placed
    in an outer block around the program.

    Args:
        source: (str) Program text
        loader: (callable | None) Maps a library name to a `LibrarySource`
    Returns:
        (ast.Block) Program block
    Raises:
        ParseError: For malformed programs or unresolvable imports
    """
    prepared = preprocess(source)
    with _numbering():
        program = parse_block(prepared.tokens)
        log.debug("Parsed program with %d statements", len(program.statements))

        if not prepared.imports:
            return program
        classes, funcs = _load_libraries(prepared.imports, loader, set())
    return ast.Block(classes + funcs + [program])


def parse_expr(text):
    """Parse a single statement from text.

    Args:
        text: (str) Statement text like "x=1+2" or "f(3)"
    Returns:
        (ast.AstNode) Parsed statement
    """
    return parse_statement(tokenize(text))


def parse_block(tokens):
    """Parse the tokens between the braces of a block.

    Args:
        tokens: (list[lark.Token]) Block contents without the braces
    Returns:
        (ast.Block) Block of parsed statements
    """
    with _numbering():
        statements = [parse_statement(s) for s in split_block(tokens)]
    return ast.Block(statements)


def parse_statement(tokens):
    """Parse the tokens of one statement.

    Args:
        tokens: (list[lark.Token]) Statement tokens without the terminator
    Returns:
        (ast.AstNode) Parsed statement, positioned at its first token
    Raises:
        ParseError: If the tokens do not form a statement
    """
    if not tokens:
        raise pqlang.ParseError("Empty statement")
    position = token_position(tokens[0])
    try:
        with _numbering():
            node = _statement(tokens)
    except pqlang.ParseError as err:
        if err.position is None:
            err.position = position
        raise
    node.position = position
    return node


def _statement(toks):
    first = _word(toks[0])
    if len(toks) == 1:
        if first == "break":
            return ast.Literal(pqlang.Break())
        if first == "return":
            return ast.Literal(pqlang.Return(ast.Literal(pqlang.Void())))

    if first in BLOCK_FORMS:
        return _block_form(toks)
    if first == "return":
        return ast.Literal(pqlang.Return(_expr(toks[1:])))

    mutation = _mutation(toks)
    if mutation is not None:
        return mutation
    return _expr(toks)


def _block_form(toks):
    """Statements built around a braced body."""
    first = _word(toks[0])

    if first == "{":
        if matching(toks, 0) != len(toks) - 1:
            raise _fail(toks)
        return parse_block(toks[1:-1])

    if first == "while":
        header, body, end = _header_body(toks, 1)
        _check_end(toks, end)
        return ast.While(_expr(header), parse_block(body))

    if first == "for":
        header, body, end = _header_body(toks, 1)
        _check_end(toks, end)
        return _for(toks, header, parse_block(body))

    if first == "if":
        header, body, end = _header_body(toks, 1)
        orelse = _else(toks, toks[end + 1:])
        return ast.IfElse(_expr(header), parse_block(body), orelse)

    if first == "fun":
        name = _identifier(_token(toks, 1))
        header, body, end = _header_body(toks, 2)
        _check_end(toks, end)
        return ast.FunctionDef(name, _params(header), parse_block(body))

    if first == "class":
        name = _identifier(_token(toks, 1))
        header, body, end = _header_body(toks, 2)
        _check_end(toks, end)
        return ast.ClassDef(name, _params(header), parse_block(body))

    raise _fail(toks)


def _header_body(toks, start):
    """Split `(header){body}` beginning at `start`.

    Returns:
        (tuple) Header tokens, body tokens, index of the closing brace
    """
    if _word(_token(toks, start)) != "(":
        raise _fail(toks)
    close = matching(toks, start)
    if _word(_token(toks, close + 1)) != "{":
        raise _fail(toks)
    end = matching(toks, close + 1)
    return toks[start + 1:close], toks[close + 2:end], end


def _check_end(toks, end):
    if end != len(toks) - 1:
        raise _fail(toks)


def _else(toks, rest):
    if not rest:
        return None
    if _word(rest[0]) != "else" or len(rest) < 2:
        raise _fail(toks)
    tail = rest[1:]
    if _word(tail[0]) == "if":
        return ast.Block([parse_statement(tail)])
    if _word(tail[0]) == "{" and matching(tail, 0) == len(tail) - 1:
        return parse_block(tail[1:-1])
    raise _fail(toks)


def _for(toks, header, body):
    clauses = split_top(header, ";")
    if len(clauses) == 1 and clauses[0]:
        counter = f"#{next(_countdowns.get())}"
        return ast.For.countdown(_expr(clauses[0]), body, counter)

    if len(clauses) != 3 or not all(clauses):
        raise pqlang.ParseError(f"Illegal for loop syntax: {render(toks)}", token_position(toks[0]))
    init = _mutation(clauses[0])
    increment = _mutation(clauses[2])
    if init is None or increment is None:
        raise pqlang.ParseError(f"Illegal for loop syntax: {render(toks)}", token_position(toks[0]))
    return ast.For(init, _expr(clauses[1]), increment, body)


def _params(toks):
    if not toks:
        return []
    params = []
    for piece in split_top(toks, ","):
        if len(piece) != 1:
            raise pqlang.ParseError(
                f"Invalid parameter list: {render(toks)}", token_position(toks[0])
            )
        name = _identifier(piece[0])
        if name in params:
            raise pqlang.ParseError(f'Duplicate parameter "{name}"', token_position(piece[0]))
        params.append(name)
    return params


def _args(toks):
    if not toks:
        return []
    pieces = split_top(toks, ",")
    if not all(pieces):
        raise pqlang.ParseError(f"Invalid argument list: {render(toks)}", token_position(toks[0]))
    return [_expr(piece) for piece in pieces]


#
# Mutating statements
#


def _mutation(toks):
    """Assignment or increment statement, None if the tokens are neither."""
    if len(toks) > 1 and _op(toks[-1]) in STEP_OPS:
        target = _target(toks[:-1])
        return _store(target, ast.UnaryOp(str(toks[-1]), _load(target)))

    index = _top_assignment(toks)
    if index is None:
        return None
    op = str(toks[index])
    target = _target(toks[:index])
    value = _expr(toks[index + 1:])
    if op != "=":
        value = ast.BinaryOp(op[0], _load(target), value)
    return _store(target, value)


def _top_assignment(toks):
    depth = 0
    for index, token in enumerate(toks):
        text = _word(token)
        if text in ("(", "[", "{"):
            depth += 1
        elif text in (")", "]", "}"):
            depth -= 1
        elif depth == 0 and _op(token) in ASSIGN_OPS:
            return index
    return None


def _target(toks):
    """Assignable location as a (kind, ...) tuple."""
    if not toks:
        raise pqlang.ParseError("Missing assignment target")
    if len(toks) == 1:
        return ("name", _identifier(toks[0]))
    if _word(toks[-1]) == "]":
        start = _group_start(toks)
        if start > 0:
            return ("index", _postfix(toks[:start]), _expr(toks[start + 1:-1]))
    if len(toks) > 2 and _word(toks[-2]) == "." and toks[-1].type == "NAME":
        return ("field", _postfix(toks[:-2]), str(toks[-1]))
    raise pqlang.ParseError(f"Cannot assign to {render(toks)}", token_position(toks[0]))


def _store(target, value):
    kind = target[0]
    if kind == "name":
        return ast.Assign(target[1], value)
    if kind == "index":
        return ast.IndexSet(target[1], target[2], value)
    return ast.FieldSet(target[1], target[2], value)


def _load(target):
    kind = target[0]
    if kind == "name":
        return ast.Lookup(target[1])
    if kind == "index":
        return ast.IndexGet(target[1], target[2])
    return ast.FieldGet(target[1], target[2])


#
# Expressions
#


def _expr(toks):
    if not toks:
        raise pqlang.ParseError("Missing expression")
    return _level(toks, 0)


def _level(toks, level):
    """Parse with the operators of one precedence level and above."""
    if level == len(LEVELS):
        return _unary(toks)

    operators = LEVELS[level]
    found = []
    depth = 0
    for index, token in enumerate(toks):
        text = _word(token)
        if text in ("(", "[", "{"):
            depth += 1
        elif text in (")", "]", "}"):
            depth -= 1
        elif depth == 0 and _op(token) in operators:
            if level == ADDITIVE and not _ends_operand(toks, index):
                continue
            found.append(index)

    if not found:
        return _level(toks, level + 1)

    bounds = [-1] + found + [len(toks)]
    operands = [toks[a + 1:b] for a, b in zip(bounds, bounds[1:])]
    if not all(operands):
        raise _fail(toks)

    node = _level(operands[0], level + 1)
    for index, operand in zip(found, operands[1:]):
        node = ast.BinaryOp(str(toks[index]), node, _level(operand, level + 1))
    return node


def _ends_operand(toks, index):
    """True if the token before `index` can end an operand."""
    if index == 0:
        return False
    token = toks[index - 1]
    if token.type in ("NUMBER", "STRING"):
        return True
    if token.type == "NAME":
        return str(token) not in _NOT_OPERANDS
    return _word(token) in (")", "]")


def _unary(toks):
    first = toks[0]
    if len(toks) > 1 and (_op(first) in PREFIX_OPS or _word(first) in PREFIX_WORDS):
        return ast.UnaryOp(str(first), _unary(toks[1:]))
    return _postfix(toks)


def _postfix(toks):
    """Calls, field and index access over a primary."""
    if not toks:
        raise pqlang.ParseError("Missing expression")
    if len(toks) == 1:
        return _atom(toks[0])

    last = _word(toks[-1])
    if _word(toks[0]) in BLOCK_FORMS and last == "}":
        return _block_form(toks)

    if last == ")":
        start = _group_start(toks)
        inner = toks[start + 1:-1]
        if start == 0:
            return _expr(inner)
        return _call(toks, toks[:start], _args(inner))

    if last == "]":
        start = _group_start(toks)
        inner = toks[start + 1:-1]
        if start == 0:
            return ast.ArrayInit(_expr(inner))
        return ast.IndexGet(_postfix(toks[:start]), _expr(inner))

    if len(toks) > 2 and _word(toks[-2]) == "." and toks[-1].type == "NAME":
        return ast.FieldGet(_postfix(toks[:-2]), str(toks[-1]))

    raise _fail(toks)


def _call(toks, head, args):
    name = _word(head[0])
    if len(head) == 1:
        if name == "print":
            return ast.Print(_single(toks, args))
        if name == "error":
            return ast.Raise(_single(toks, args))
        return ast.FunctionCall(_identifier(head[0]), args)

    if len(head) == 2 and name == "new":
        return ast.New(_identifier(head[1]), args)

    if len(head) > 2 and _word(head[-2]) == "." and head[-1].type == "NAME":
        return ast.MethodCall(_postfix(head[:-2]), str(head[-1]), args)

    raise _fail(toks)


def _single(toks, args):
    if len(args) != 1:
        raise pqlang.ParseError(
            f"Expected one argument in: {render(toks)}", token_position(toks[0])
        )
    return args[0]


def _atom(token):
    if token.type == "NUMBER":
        return ast.Literal(pqlang.Number(float(token)))
    if token.type == "STRING":
        return ast.Literal(pqlang.String(_unescape(str(token)[1:-1])))

    if token.type == "NAME":
        text = str(token)
        if text == "true":
            return ast.Literal(pqlang.Boolean(True))
        if text == "false":
            return ast.Literal(pqlang.Boolean(False))
        if text == "read":
            return ast.Read()
        return ast.Lookup(_identifier(token))

    raise _fail([token])


_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t"}


def _unescape(text):
    if "\\" not in text:
        return text
    chars = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char == "\\" and pos + 1 < len(text):
            follow = text[pos + 1]
            chars.append(_ESCAPES.get(follow, char + follow))
            pos += 2
            continue
        chars.append(char)
        pos += 1
    return "".join(chars)


#
# Token helpers
#


def _group_start(toks):
    """Index of the bracket opening the group that ends the tokens."""
    depth = 0
    start = None
    for index, token in enumerate(toks):
        text = _word(token)
        if text in ("(", "[", "{"):
            if depth == 0:
                start = index
            depth += 1
        elif text in (")", "]", "}"):
            depth -= 1
    if start is None or matching(toks, start) != len(toks) - 1:
        raise _fail(toks)
    return start


def _identifier(token):
    text = str(token)
    if token.type != "NAME" or text in KEYWORDS:
        raise pqlang.ParseError(f'Invalid identifier "{text}"', token_position(token))
    return text


def _token(toks, index):
    if index >= len(toks):
        raise _fail(toks)
    return toks[index]


def _word(token):
    if token.type in ("NAME", "PUNCT"):
        return str(token)
    return None


def _op(token):
    if token.type == "OP":
        return str(token)
    return None


def _fail(toks):
    return pqlang.ParseError(f"Could not parse: {render(toks)}", token_position(toks[0]))


#
# Libraries
#


def _load_libraries(names, loader, seen):
    """Declarations of the named libraries and everything they import.

    Args:
        names: (list[str]) Library names in import order
        loader: (callable | None) Maps a name to a `LibrarySource`
        seen: (set) Names already loaded during this parse
    Returns:
        (tuple) ClassDef and FunctionDef node lists
    """
    classes = []
    funcs = []
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        if loader is None:
            raise pqlang.LibraryNotFoundError(f'Cannot import "{name}" without a library loader')

        library = loader(name)
        log.debug("Parsing library %s from %s", name, library.location)
        try:
            prepared = preprocess(library.content)
            nested_classes, nested_funcs = _load_libraries(prepared.imports, loader, seen)
            block = parse_block(prepared.tokens)
        except pqlang.ParseError as err:
            if err.position is not None and err.position.filename is None:
                err.position.filename = library.location
            raise
        classes.extend(nested_classes + block.class_defs)
        funcs.extend(nested_funcs + block.functions)
    return classes, funcs
