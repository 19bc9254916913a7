"""Tests for scoping, assignment and control flow"""

import pqlang
import pqtest


def test_while_counts_outer_variable():
    assert pqtest.run_python("i = 0; while(i < 10){ i = i + 1; } i") == 10


def test_while_countdown_terminates():
    assert pqtest.run_python("x = 5; while(x > 0){ x = x - 1; } x == 0") is True


def test_loop_local_binding_is_dropped():
    source = "i = 0; while(i < 3){ y = 5; i++; } y"
    pqtest.fails(source, pqlang.EvalError, 'Variable "y" does not exist')


def test_type_change_inside_block_stays_local():
    assert pqtest.run_python('x = 1; { x = "text"; } x') == 1


def test_same_type_assignment_is_visible():
    assert pqtest.run_python('x = 1; { x = 2; } x') == 2
    assert pqtest.run_python('s = "a"; if(true){ s = s + "b"; } s') == "ab"


def test_block_value():
    assert pqtest.run_python("{ 1; 2; 3 }") == 3
    assert pqtest.run_python("x = if(1 < 2){ 10 }else{ 20 }; x") == 10


def test_if_else():
    assert pqtest.run_python("if(false){ 1 }else{ 2 }") == 2
    assert pqtest.run_python("if(false){ 1 }") is None


def test_else_if_chain():
    assert pqtest.run_python("if(false){1}else if(true){2}else{3}") == 2
    assert pqtest.run_python("if(false){1}else if(false){2}else{3}") == 3


def test_condition_must_be_boolean():
    pqtest.fails("if(1){ 2 }", pqlang.EvalError, "Condition was Number and has to be a boolean")
    pqtest.fails("while(\"x\"){ 2 }", pqlang.EvalError, "Condition was String")


def test_for_loop():
    assert pqtest.run_python("n = 0; for(i = 0; i < 4; i++){ n = n + i; } n") == 6


def test_for_loop_variable_is_local():
    pqtest.fails("for(i = 0; i < 2; i++){ } i", pqlang.EvalError, 'Variable "i" does not exist')


def test_countdown_for():
    assert pqtest.run_python("n = 0; for(3){ n = n + 1; } n") == 3


def test_nested_countdown_for():
    assert pqtest.run_python("n = 0; for(2){ for(3){ n++; } } n") == 6


def test_countdown_in_called_function():
    source = "n = 0; fun inner(){ for(3){ n++; } } for(2){ inner(); } n"
    assert pqtest.run_python(source) == 6


def test_compound_assignment():
    assert pqtest.run_python("a = 10; a += 5; a -= 3; a *= 2; a /= 4; a") == 6
    assert pqtest.run_python("a = 1; a++; a++; a--; a") == 2


def test_break_ends_nearest_loop():
    source = """
    i = 0; j = 0;
    while(i < 3){
        i = i + 1;
        while(true){
            j = j + 1;
            if(j > 0){ break; }
        }
    }
    i * 10 + j
    """
    assert pqtest.run_python(source) == 33


def test_break_stops_rest_of_body():
    source = """
    n = 0;
    while(true){ n++; break; n = 100; }
    n
    """
    assert pqtest.run_python(source) == 1


def test_top_level_return():
    result, output = pqtest.run_output('print("a"); return 5; print("b");')
    assert result.to_python() == 5
    assert output == ["a"]


def test_cannot_assign_control_signal():
    pqtest.fails("x = { break; }", pqlang.EvalError, "Cannot assign Break")


def test_print_and_read():
    source = 'a = read; b = read; c = read; print(a + "-" + b); c'
    result, output = pqtest.run_output(source, ["one", "two"])
    assert output == ["one-two"]
    assert result.to_python() == ""


def test_print_values():
    source = 'print(1); print(2.5); print(true); print("s"); a = [2]; a[0] = 1; print(a)'
    _, output = pqtest.run_output(source)
    assert output == ["1", "2.5", "true", "s", "(1, void)"]


def test_type_field():
    source = 'a = [1]; print(1.type); print(true.type); print("s".type); print(a.type); print(a[0].type)'
    _, output = pqtest.run_output(source)
    assert output == ["Number", "Boolean", "String", "Array", "Void"]


def test_length_field():
    assert pqtest.run_python('"hello".length') == 5
    assert pqtest.run_python("[4].length") == 4
