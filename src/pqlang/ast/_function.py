"""Nodes for function declaration and invocation."""

__all__ = ["FunctionDef", "FunctionCall", "check_params", "unwrap_return"]

import pqlang

from . import _base


def check_params(owner, params):
    if not isinstance(params, list) or not all(isinstance(p, str) for p in params):
        raise TypeError(f"{owner} params must be list of str, got {params!r}")
    if len(set(params)) != len(params):
        raise ValueError(f"{owner} has duplicate parameter names {params!r}")


def check_arity(kind, name, params, args):
    if len(params) != len(args):
        raise pqlang.EvalError(
            f'Expected {len(params)} arguments for {kind} "{name}" but got {len(args)}'
        )


def unwrap_return(result, env):
    """Value of a finished body, resolving a Return signal in the caller."""
    if isinstance(result, pqlang.Return):
        return result.expr.evaluate(env)
    return result


class FunctionDef(_base.AstNode):
    """Function declaration: fun name(params){body}

    Evaluating the declaration registers it in the current function
    environment. Declarations are immutable once registered.
    """

    def __init__(self, name, params, body):
        _base.check_name("FunctionDef", "name", name)
        check_params("FunctionDef", params)
        if not isinstance(body, pqlang.ast.Block):
            raise TypeError(f"FunctionDef body must be Block, got {type(body)}")
        self.name = name
        self.params = params
        self.body = body

    def evaluate(self, env):
        if self.name in env.funcs:
            raise pqlang.EvalError(f'Function "{self.name}" already exists')
        env.funcs[self.name] = self
        return pqlang.Void()

    def unparse(self):
        return f"fun {self.name}({','.join(self.params)}){self.body.unparse()}"

    def __repr__(self):
        return f"FunctionDef({self.name!r}, {self.params!r})"


class FunctionCall(_base.AstNode):
    """Free function call: name(args)

    The body runs against a copy of the caller's variables with the
    parameters bound to copies of the arguments.
    """

    def __init__(self, name, args):
        _base.check_name("FunctionCall", "name", name)
        _base.check_nodes("FunctionCall", "args", args)
        self.name = name
        self.args = args

    def evaluate(self, env):
        func = env.funcs.get(self.name)
        if func is None:
            raise pqlang.EvalError(f'No such function "{self.name}"')
        check_arity("function", self.name, func.params, self.args)

        call_env = pqlang.Env(dict(env.vars), env.funcs, env.classes, env.io)
        for param, arg in zip(func.params, self.args):
            call_env.vars[param] = arg.evaluate(env).copy()

        result = func.body.evaluate(call_env)
        return unwrap_return(result, env)

    def unparse(self):
        return f"{self.name}({_base.unparse_args(self.args)})"

    def __repr__(self):
        return f"FunctionCall({self.name!r}, {self.args!r})"
