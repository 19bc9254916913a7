"""Nodes for classes, instances, fields and methods.

An instance owns its variable and function environments. The class body is
evaluated directly against those environments, so every field assignment
and method declaration in the body ends up in the instance.
"""

__all__ = ["ClassDef", "New", "FieldGet", "FieldSet", "MethodCall"]

import pqlang

from . import _base
from ._assign import bind
from ._function import check_arity, check_params, unwrap_return


class ClassDef(_base.AstNode):
    """Class declaration: class name(params){body}

    Attributes:
        class_env: (dict) Classes visible to instances, set by the block
            that declares this class to the map of all its sibling classes
    """

    def __init__(self, name, params, body):
        _base.check_name("ClassDef", "name", name)
        check_params("ClassDef", params)
        if not isinstance(body, pqlang.ast.Block):
            raise TypeError(f"ClassDef body must be Block, got {type(body)}")
        self.name = name
        self.params = params
        self.body = body
        self.class_env = {}

    def evaluate(self, env):
        if self.name in env.classes:
            raise pqlang.EvalError(f'Class "{self.name}" already exists')
        env.classes[self.name] = self
        return pqlang.Void()

    def unparse(self):
        return f"class {self.name}({','.join(self.params)}){self.body.unparse()}"

    def __repr__(self):
        return f"ClassDef({self.name!r}, {self.params!r})"


class New(_base.AstNode):
    """Instantiate a class: new Name(args)"""

    def __init__(self, class_name, args):
        _base.check_name("New", "class_name", class_name)
        _base.check_nodes("New", "args", args)
        self.class_name = class_name
        self.args = args

    def evaluate(self, env):
        klass = env.classes.get(self.class_name)
        if klass is None:
            raise pqlang.EvalError(f'No such class "{self.class_name}"')
        check_arity("constructor of", self.class_name, klass.params, self.args)

        vars = {}
        for param, arg in zip(klass.params, self.args):
            vars[param] = arg.evaluate(env).copy()

        # Nested classes of the body are registered per instance
        instance_env = pqlang.Env(vars, {}, dict(klass.class_env), env.io)
        klass.body.evaluate(instance_env, scoped=False)
        return pqlang.Object(self.class_name, vars, instance_env.funcs, instance_env.classes)

    def unparse(self):
        return f"new {self.class_name}({_base.unparse_args(self.args)})"

    def __repr__(self):
        return f"New({self.class_name!r}, {self.args!r})"


def _object(target, env, what):
    value = target.evaluate(env)
    if not isinstance(value, pqlang.Object):
        raise pqlang.EvalError(f"Can only access {what} on objects. Got {value.type_name}")
    return value


class FieldGet(_base.AstNode):
    """Field read: target.name

    `.type` works on every value and `.length` on arrays and strings.
    """

    def __init__(self, target, name):
        _base.check_node("FieldGet", "target", target)
        _base.check_name("FieldGet", "name", name)
        self.target = target
        self.name = name

    def evaluate(self, env):
        value = self.target.evaluate(env)
        if self.name == "type":
            return pqlang.String(value.type_name)
        if self.name == "length":
            if isinstance(value, pqlang.Array):
                return pqlang.Number(len(value))
            if isinstance(value, pqlang.String):
                return pqlang.Number(len(value.value))

        if not isinstance(value, pqlang.Object):
            raise pqlang.EvalError(f"Can only access fields on objects. Got {value.type_name}")
        try:
            return value.vars[self.name]
        except KeyError:
            raise pqlang.EvalError(
                f'{value.class_name} does not contain field "{self.name}"'
            ) from None

    def unparse(self):
        return f"{self.target.unparse()}.{self.name}"

    def __repr__(self):
        return f"FieldGet({self.target!r}, {self.name!r})"


class FieldSet(_base.AstNode):
    """Field write: target.name=value"""

    def __init__(self, target, name, value):
        _base.check_node("FieldSet", "target", target)
        _base.check_name("FieldSet", "name", name)
        _base.check_node("FieldSet", "value", value)
        self.target = target
        self.name = name
        self.value = value

    def evaluate(self, env):
        obj = _object(self.target, env, "fields")
        bind(obj.vars, self.name, self.value.evaluate(env))
        return pqlang.Void()

    def unparse(self):
        return f"{self.target.unparse()}.{self.name}={self.value.unparse()}"

    def __repr__(self):
        return f"FieldSet({self.target!r}, {self.name!r}, {self.value!r})"


class MethodCall(_base.AstNode):
    """Method call: target.name(args)

    Arguments are bound straight into the instance variables, the method
    body works on the instance's own environments.
    """

    def __init__(self, target, name, args):
        _base.check_node("MethodCall", "target", target)
        _base.check_name("MethodCall", "name", name)
        _base.check_nodes("MethodCall", "args", args)
        self.target = target
        self.name = name
        self.args = args

    def evaluate(self, env):
        obj = _object(self.target, env, "methods")
        func = obj.funcs.get(self.name)
        if func is None:
            raise pqlang.EvalError(f'{obj.class_name} does not contain method "{self.name}"')
        check_arity("method", self.name, func.params, self.args)

        values = [arg.evaluate(env).copy() for arg in self.args]
        for param, value in zip(func.params, values):
            obj.vars[param] = value

        method_env = pqlang.Env(obj.vars, obj.funcs, obj.classes, env.io)
        result = func.body.evaluate(method_env)
        return unwrap_return(result, env)

    def unparse(self):
        return f"{self.target.unparse()}.{self.name}({_base.unparse_args(self.args)})"

    def __repr__(self):
        return f"MethodCall({self.target!r}, {self.name!r}, {self.args!r})"
