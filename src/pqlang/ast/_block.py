"""Nodes for blocks, conditionals and loops."""

__all__ = ["Block", "IfElse", "While", "For"]

import pqlang

from . import _base
from ._literal import Literal


class Block(_base.AstNode):
    """Sequence of statements evaluated in their own scope.

    Leading class declarations are registered before any other statement
    runs and each of them sees all of its siblings, so classes declared in
    the same block can instantiate each other in any order.

    The block result is the value of the last statement. A Break or Return
    result stops the block early and is passed to the caller. The value of
    a Return is computed against the enclosing environments, so names bound
    only inside the block are not visible to it.
    """

    def __init__(self, statements):
        _base.check_nodes("Block", "statements", statements)
        self.statements = statements

        split = 0
        while split < len(statements) and isinstance(statements[split], pqlang.ast.ClassDef):
            split += 1
        self.classes = statements[:split]
        self.body = statements[split:]

    @property
    def functions(self):
        """(list[FunctionDef]) Function declarations directly in this block."""
        return [s for s in self.statements if isinstance(s, pqlang.ast.FunctionDef)]

    @property
    def class_defs(self):
        """(list[ClassDef]) Class declarations directly in this block."""
        return [s for s in self.statements if isinstance(s, pqlang.ast.ClassDef)]

    def evaluate(self, env, scoped=True):
        """Evaluate the statements.

        Args:
            env: (Env) Environments of the enclosing scope
            scoped: (bool) Work on a copy of the environments. Object
                construction evaluates the class body unscoped so fields,
                methods and nested classes land in the instance.
        Returns:
            (Value) Last statement value, or the stopping Break/Return
        """
        local = env.copy() if scoped else env

        if self.classes:
            siblings = {}
            for class_def in self.classes:
                class_def.evaluate(local)
                siblings[class_def.name] = class_def
            for class_def in self.classes:
                class_def.class_env = siblings

        result = pqlang.Void()
        for statement in self.body:
            try:
                result = statement.evaluate(local)
                if isinstance(result, pqlang.Return):
                    value = result.expr.evaluate(env)
                    return pqlang.Return(Literal(value.copy()))
            except pqlang.LangError as err:
                if err.position is None:
                    err.position = statement.position
                raise
            if isinstance(result, pqlang.Break):
                return result
        return result

    def unparse(self):
        return "{" + "".join(f"{s.unparse()};" for s in self.statements) + "}"

    def __repr__(self):
        return f"Block({self.statements!r})"


def _condition(node, env):
    value = node.evaluate(env)
    if not isinstance(value, pqlang.Boolean):
        raise pqlang.EvalError(f"Condition was {value.type_name} and has to be a boolean")
    return value.value


class IfElse(_base.AstNode):
    """Conditional: if(cond){body}else{orelse}

    Args:
        condition: (AstNode) Must evaluate to a Boolean
        body: (Block) Evaluated when the condition is true
        orelse: (Block | None) Evaluated when the condition is false
    """

    def __init__(self, condition, body, orelse=None):
        _base.check_node("IfElse", "condition", condition)
        if not isinstance(body, Block):
            raise TypeError(f"IfElse body must be Block, got {type(body)}")
        if orelse is not None and not isinstance(orelse, Block):
            raise TypeError(f"IfElse orelse must be Block, got {type(orelse)}")
        self.condition = condition
        self.body = body
        self.orelse = orelse

    def evaluate(self, env):
        if _condition(self.condition, env):
            return self.body.evaluate(env)
        if self.orelse is not None:
            return self.orelse.evaluate(env)
        return pqlang.Void()

    def unparse(self):
        text = f"if({self.condition.unparse()}){self.body.unparse()}"
        if self.orelse is not None:
            text += f"else{self.orelse.unparse()}"
        return text

    def __repr__(self):
        return f"IfElse({self.condition!r}, {self.body!r}, {self.orelse!r})"


class While(_base.AstNode):
    """Loop while a condition holds: while(cond){body}

    The condition is evaluated in the enclosing scope, the body runs in a
    fresh copy of the scope on every iteration.
    """

    def __init__(self, condition, body):
        _base.check_node("While", "condition", condition)
        if not isinstance(body, Block):
            raise TypeError(f"While body must be Block, got {type(body)}")
        self.condition = condition
        self.body = body

    def evaluate(self, env):
        scope = env.copy()
        while True:
            scope = scope.copy()
            if not _condition(self.condition, env):
                return pqlang.Void()
            result = self.body.evaluate(scope)
            if isinstance(result, pqlang.Break):
                return pqlang.Void()
            if isinstance(result, pqlang.Return):
                return result

    def unparse(self):
        return f"while({self.condition.unparse()}){self.body.unparse()}"

    def __repr__(self):
        return f"While({self.condition!r}, {self.body!r})"


class For(_base.AstNode):
    """Counting loop: for(init;cond;increment){body}

    The initializer runs once in a private copy of the scope. Every
    iteration copies that scope again, checks the condition, runs the body
    and finally the increment.
    """

    def __init__(self, init, condition, increment, body):
        _base.check_node("For", "init", init)
        _base.check_node("For", "condition", condition)
        _base.check_node("For", "increment", increment)
        if not isinstance(body, Block):
            raise TypeError(f"For body must be Block, got {type(body)}")
        self.init = init
        self.condition = condition
        self.increment = increment
        self.body = body
        self.count = None

    @classmethod
    def countdown(cls, count, body, counter):
        """Loop that runs `count` times: for(count){body}

        Args:
            count: (AstNode) Number of iterations
            body: (Block) Loop body
            counter: (str) Hidden counter name, not a valid identifier
        """
        counter_ref = pqlang.ast.Lookup(counter)
        loop = cls(
            pqlang.ast.Assign(counter, count),
            pqlang.ast.BinaryOp(">", counter_ref, Literal(pqlang.Number(0))),
            pqlang.ast.Assign(counter, pqlang.ast.UnaryOp("--", counter_ref)),
            body,
        )
        loop.count = count
        return loop

    def evaluate(self, env):
        scope = env.copy()
        self.init.evaluate(scope)
        while True:
            scope = scope.copy()
            if not _condition(self.condition, scope):
                return pqlang.Void()
            result = self.body.evaluate(scope)
            if isinstance(result, pqlang.Break):
                return pqlang.Void()
            if isinstance(result, pqlang.Return):
                return result
            self.increment.evaluate(scope)

    def unparse(self):
        if self.count is not None:
            return f"for({self.count.unparse()}){self.body.unparse()}"
        header = f"{self.init.unparse()};{self.condition.unparse()};{self.increment.unparse()}"
        return f"for({header}){self.body.unparse()}"

    def __repr__(self):
        return f"For({self.init!r}, {self.condition!r}, {self.increment!r}, {self.body!r})"
