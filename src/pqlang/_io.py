"""Line oriented console collaborators for print and read."""

__all__ = ["ConsoleIO", "BufferedIO"]

import sys


class ConsoleIO:
    """Console backed by text streams.

    Args:
        stdin: Readable text stream, defaults to `sys.stdin`
        stdout: Writable text stream, defaults to `sys.stdout`
    """

    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin
        self.stdout = stdout

    def write_line(self, text):
        stream = self.stdout or sys.stdout
        stream.write(text + "\n")
        stream.flush()

    def read_line(self):
        """Blocking read of one line.

        Returns:
            (str | None) Line without its newline, None at end of input
        """
        stream = self.stdin or sys.stdin
        line = stream.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def __repr__(self):
        return "ConsoleIO<>"


class BufferedIO:
    """In-memory console used for embedding and tests.

    Args:
        lines: (list[str] | None) Lines served to `read`

    Attributes:
        output: (list[str]) Every line written by `print`
    """

    def __init__(self, lines=None):
        self.lines = list(lines or [])
        self.output = []

    def write_line(self, text):
        self.output.append(text)

    def read_line(self):
        if not self.lines:
            return None
        return self.lines.pop(0)

    def __repr__(self):
        return f"BufferedIO<{len(self.output)} lines>"
