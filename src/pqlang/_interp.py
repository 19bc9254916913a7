"""Interpreter facade tying the parser, loader and evaluator together."""

__all__ = ["Interp"]

import logging
import time
from pathlib import Path

import pqlang
from pqlang import _import


log = logging.getLogger(__name__)


class Interp:
    """Interpreter and state for PQLang.

    Every program run starts from a fresh, empty root environment. The
    interpreter only holds what is shared between runs: the console and
    the library search path.

    Args:
        io: Console used by print and read, defaults to `ConsoleIO()`
        search_paths: (list[str] | None) Extra library directories,
            searched before `PQLANG_PATH` and the working directory
    """

    def __init__(self, io=None, search_paths=None):
        self.io = pqlang.ConsoleIO() if io is None else io
        self.search_paths = _import.search_paths(search_paths)
        self.loader = _import.FileLoader(self.search_paths)

    def parse(self, source, loader=None):
        """Parse program text into its block.

        Args:
            source: (str) Program text
            loader: (callable | None) Library loader, defaults to the
                interpreter's `FileLoader`
        Returns:
            (ast.Block) Parsed program
        """
        start = time.perf_counter()
        block = pqlang.parse(source, loader or self.loader)
        log.debug("Parsed in %.2fms", (time.perf_counter() - start) * 1000)
        return block

    def evaluate(self, block):
        """Run a parsed program in a fresh root environment.

        A `return` at the top level ends the program with its value.

        Args:
            block: (ast.Block) Parsed program
        Returns:
            (Value) Program result
        """
        env = pqlang.Env(io=self.io)
        start = time.perf_counter()
        result = block.evaluate(env)
        if isinstance(result, pqlang.Return):
            result = result.expr.evaluate(env)
        log.debug("Evaluated in %.2fms", (time.perf_counter() - start) * 1000)
        return result

    def run(self, source):
        """Parse and evaluate program text."""
        return self.evaluate(self.parse(source))

    def run_file(self, path):
        """Parse and evaluate a program file.

        Imports are searched in the file's directory before the configured
        search path.
        """
        path = Path(path)
        source = path.read_text(encoding="utf-8")
        loader = _import.FileLoader([str(path.resolve().parent)] + self.search_paths)
        log.debug("Running %s", path)
        return self.evaluate(self.parse(source, loader))

    def __repr__(self):
        return f"Interp<{self.io!r}>"
