"""Tests for library imports and the file loader"""

import os

import pytest

import pqlang


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def test_file_loader(tmp_path):
    _write(tmp_path / "lib.pq", "fun one(){ 1 }")
    loader = pqlang.FileLoader([str(tmp_path)])
    source = loader("lib")
    assert source.name == "lib"
    assert source.location == os.path.abspath(tmp_path / "lib.pq")
    assert "fun one" in source.content


def test_file_loader_search_order(tmp_path):
    _write(tmp_path / "first" / "lib.pq", "first")
    _write(tmp_path / "second" / "lib.pq", "second")
    loader = pqlang.FileLoader([str(tmp_path / "first"), str(tmp_path / "second")])
    assert loader("lib").content == "first"


def test_file_loader_subdirectory(tmp_path):
    _write(tmp_path / "util" / "text.pq", "nested")
    loader = pqlang.FileLoader([str(tmp_path)])
    assert loader("util/text").content == "nested"


@pytest.mark.parametrize("name", ["missing", "../escape", "lib.pq", ""])
def test_file_loader_not_found(tmp_path, name):
    loader = pqlang.FileLoader([str(tmp_path)])
    with pytest.raises(pqlang.LibraryNotFoundError):
        loader(name)


def test_search_paths_environment(tmp_path):
    environ = {pqlang.PATH_VARIABLE: os.pathsep.join(["/a", "/b", ""])}
    paths = pqlang.search_paths(["/x", "/a"], environ)
    assert paths[:3] == ["/x", "/a", "/b"]
    assert paths[-1] == os.getcwd()


def test_import_functions_and_classes(tmp_path):
    _write(tmp_path / "lib.pq", """
        fun double(x){ return x * 2; }
        class Box(v){ value = v; }
        ignored = print("never printed");
    """)
    main = _write(tmp_path / "main.pq", "import lib;\nb = new Box(double(4)); b.value")
    io = pqlang.BufferedIO()
    result = pqlang.Interp(io=io).run_file(main)
    assert result.to_python() == 8
    assert io.output == []


def test_import_through_search_path(tmp_path):
    _write(tmp_path / "libs" / "math2.pq", "fun sq(x){ return x * x; }")
    interp = pqlang.Interp(io=pqlang.BufferedIO(), search_paths=[str(tmp_path / "libs")])
    assert interp.run("import math2; sq(7)").to_python() == 49


def test_import_environment_variable(tmp_path, monkeypatch):
    _write(tmp_path / "envlib.pq", "fun three(){ 3 }")
    monkeypatch.setenv(pqlang.PATH_VARIABLE, str(tmp_path))
    interp = pqlang.Interp(io=pqlang.BufferedIO())
    assert interp.run("import envlib; three()").to_python() == 3


def test_nested_and_circular_imports(tmp_path):
    _write(tmp_path / "a.pq", "import b; fun fa(){ return fb() + 1; }")
    _write(tmp_path / "b.pq", "import a; fun fb(){ return 10; }")
    main = _write(tmp_path / "main.pq", "import a; import b; fa()")
    assert pqlang.Interp(io=pqlang.BufferedIO()).run_file(main).to_python() == 11


def test_missing_library(tmp_path):
    main = _write(tmp_path / "main.pq", "import nowhere; 1")
    with pytest.raises(pqlang.LibraryNotFoundError, match='Library "nowhere" not found'):
        pqlang.Interp(io=pqlang.BufferedIO()).run_file(main)


def test_library_parse_error_names_file(tmp_path):
    _write(tmp_path / "broken.pq", "fun f(){ 1 }\nfun (){ }")
    main = _write(tmp_path / "main.pq", "import broken; 1")
    with pytest.raises(pqlang.ParseError) as info:
        pqlang.Interp(io=pqlang.BufferedIO()).run_file(main)
    assert "broken.pq" in str(info.value)


def test_library_names_clash_with_program(tmp_path):
    _write(tmp_path / "lib.pq", "fun f(){ 1 }")
    main = _write(tmp_path / "main.pq", "import lib; fun f(){ 2 } f()")
    with pytest.raises(pqlang.EvalError, match='Function "f" already exists'):
        pqlang.Interp(io=pqlang.BufferedIO()).run_file(main)


def test_parse_with_custom_loader():
    libraries = {"mem": "fun hello(){ \"hi\" }"}

    def loader(name):
        return pqlang.LibrarySource(name, f"<{name}>", libraries[name])

    block = pqlang.parse("import mem; hello()", loader)
    assert [type(s).__name__ for s in block.statements] == ["FunctionDef", "Block"]
    result = pqlang.Interp(io=pqlang.BufferedIO()).evaluate(block)
    assert result.to_python() == "hi"
