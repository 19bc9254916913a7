"""Tests for statement and expression parsing"""

import pytest

import pqlang
import pqtest
from pqlang import ast


@pqtest.params(
    "source expected",
    precedence=("1+2*3", "(1+(2*3))"),
    parens=("(1+2)*3", "((1+2)*3)"),
    left_assoc=("1-2-3", "((1-2)-3)"),
    logic=("a<b&&b<c||d", "(((a<b)&&(b<c))||d)"),
    equality=("a==b!=c", "((a==b)!=c)"),
    modulo=("a%2==0", "((a%2)==0)"),
    unary_minus=("-x*2", "((-x)*2)"),
    binary_unary=("a - -b", "(a-(-b))"),
    mul_unary=("2*-3", "(2*(-3))"),
    negate=("!a&&b", "((!a)&&b)"),
    unary_plus=("+a", "(+a)"),
    sqrt=("sqrt 4+1", "(sqrt 4+1)"),
    sqrt_call=("floor(x/2)", "floor (x/2)"),
    string=('"a"+b', '("a"+b)'),
    escaped=(r'"say \"hi\""', r'"say \"hi\""'),
    number=("2.50", "2.5"),
    integral=("7.0", "7"),
)
def test_expression_unparse(key, source, expected):
    pqtest.assert_unparse(source, expected)


@pqtest.params(
    "source expected",
    assign=("x = 5", "x=5"),
    index=("a[1] = 2", "a[1]=2"),
    field=("c.n = 1", "c.n=1"),
    nested_field=("a.b.c = 1", "a.b.c=1"),
    compound=("a += 1", "a=(a+1)"),
    compound_div=("a /= b+1", "a=(a/(b+1))"),
    increment=("i++", "i=(i+1)"),
    index_increment=("a[i]++", "a[i]=(a[i]+1)"),
    field_decrement=("c.n--", "c.n=(c.n-1)"),
    index_compound=("a[0] *= 3", "a[0]=(a[0]*3)"),
    call_index=("f()[0] = 1", "f()[0]=1"),
)
def test_assignment_unparse(key, source, expected):
    pqtest.assert_unparse(source, expected)


@pqtest.params(
    "source expected",
    call=("f(1, 2)", "f(1,2)"),
    no_args=("f()", "f()"),
    method=("c.inc()", "c.inc()"),
    chain=("new A(1).get(2)", "new A(1).get(2)"),
    new=("new Counter(0)", "new Counter(0)"),
    print=('print("hi")', 'print("hi")'),
    error=('error("bad")', 'error("bad")'),
    array=("[3]", "[3]"),
    index=("a[i+1]", "a[(i+1)]"),
    matrix=("m[0][1]", "m[0][1]"),
    field=("x.type", "x.type"),
    length=("a.length", "a.length"),
    read=("read", "read"),
    boolean=("true", "true"),
    break_=("break", "break"),
    return_=("return x+1", "return (x+1)"),
)
def test_postfix_unparse(key, source, expected):
    pqtest.assert_unparse(source, expected)


@pqtest.params(
    "source expected",
    while_=("while(i<3){i++}", "while((i<3)){i=(i+1);}"),
    if_=("if(a){1}", "if(a){1;}"),
    if_else=("if(a){1}else{2}", "if(a){1;}else{2;}"),
    else_if=("if(a){1}else if(b){2}else{3}", "if(a){1;}else{if(b){2;}else{3;};}"),
    for_=("for(i=0;i<3;i++){x}", "for(i=0;(i<3);i=(i+1)){x;}"),
    countdown=("for(3){x}", "for(3){x;}"),
    fun=("fun f(a,b){return a+b;}", "fun f(a,b){return (a+b);}"),
    class_=("class A(x){y=x;fun g(){return y;}}", "class A(x){fun g(){return y;};y=x;}"),
    block=("{a;b}", "{a;b;}"),
    if_value=("x = if(c){1}else{2}", "x=if(c){1;}else{2;}"),
)
def test_block_form_unparse(key, source, expected):
    pqtest.assert_unparse(source, expected)


def test_node_types():
    node = pqlang.parse_expr("x = f(1) + c.n * a[2]")
    assert isinstance(node, ast.Assign)
    assert isinstance(node.value, ast.BinaryOp)
    assert isinstance(node.value.left, ast.FunctionCall)
    product = node.value.right
    assert isinstance(product.left, ast.FieldGet)
    assert isinstance(product.right, ast.IndexGet)


def test_control_literals():
    node = pqlang.parse_expr("return")
    assert isinstance(node, ast.Literal)
    assert isinstance(node.value, pqlang.Return)
    node = pqlang.parse_expr("break")
    assert isinstance(node.value, pqlang.Break)


def test_program_hoisting():
    block = pqlang.parse("x = 1; fun f(){ 1 } class A(){ }")
    assert [type(s).__name__ for s in block.statements] == ["ClassDef", "FunctionDef", "Assign"]
    assert [c.name for c in block.classes] == ["A"]
    assert [f.name for f in block.functions] == ["f"]


def test_nested_countdowns_use_separate_counters():
    node = pqlang.parse_expr("for(2){ for(3){ x } }")
    inner = node.body.statements[0]
    assert node.init.name != inner.init.name
    assert node.init.name.startswith("#")


def test_statement_positions():
    block = pqlang.parse("x = 1;\n\n  y = 2;")
    assert block.statements[1].position.start_line == 3
    assert block.statements[1].position.start_column == 3


@pqtest.params(
    "source match",
    dangling=("1+", "Could not parse: 1\\+"),
    missing_value=("x=", "Missing expression"),
    two_names=("x y", "Could not parse"),
    double_minus=("a--b", "Could not parse"),
    dup_param=("fun f(a,a){1}", 'Duplicate parameter "a"'),
    bad_fun_name=("fun 1(){}", "Invalid identifier"),
    keyword_target=("true = 1", 'Invalid identifier "true"'),
    keyword_var=("x = while", 'Invalid identifier "while"'),
    no_body=("while(x)", "Could not parse"),
    for_two=("for(a;b){x}", "Illegal for loop"),
    for_init=("for(x;x<3;x++){x}", "Illegal for loop"),
    for_empty=("for(){x}", "Illegal for loop"),
    dangling_else=("if(a){1}else", "Could not parse"),
    trailing_comma=("f(1,)", "Invalid argument list"),
    print_args=("print(1,2)", "Expected one argument"),
    bad_target=("1 = 2", "Invalid identifier"),
    expr_target=("a+b = 2", "Cannot assign"),
    bad_param=("fun f(a+b){1}", "Invalid parameter list"),
)
def test_parse_errors(key, source, match):
    with pytest.raises(pqlang.ParseError, match=match):
        pqlang.parse(source)


def test_parse_error_position():
    with pytest.raises(pqlang.ParseError) as info:
        pqlang.parse("x = 1;\ny = ;")
    assert info.value.position.start_line == 2
    assert "(on line 2)" in str(info.value)


def test_import_without_loader():
    with pytest.raises(pqlang.LibraryNotFoundError):
        pqlang.parse("import lib; 1")


def test_node_validation():
    one = ast.Literal(pqlang.Number(1))
    with pytest.raises(ValueError):
        ast.UnaryOp("?", one)
    with pytest.raises(ValueError):
        ast.BinaryOp("**", one, one)
    with pytest.raises(TypeError):
        ast.Assign("x", 1)
    with pytest.raises(TypeError):
        ast.Literal(5)
    with pytest.raises(ValueError):
        ast.FunctionDef("f", ["a", "a"], ast.Block([]))
    with pytest.raises(TypeError):
        ast.While(one, one)


def test_countdown_counters_numbered_per_parse():
    first = pqlang.parse("for(2){ x }")
    second = pqlang.parse("for(2){ x }")
    assert first.statements[0].init.name == second.statements[0].init.name


def test_sibling_countdowns_use_separate_counters():
    block = pqlang.parse("for(2){ x } for(3){ y }")
    names = [s.init.name for s in block.statements]
    assert len(set(names)) == 2
