"""Line-oriented terminal prompt used by the rotation workflow."""

import sys
from typing import Protocol, TextIO


class LinePrompt(Protocol):
    """Capability to talk to the operator one line at a time."""

    def write(self, message: str) -> None:
        """Show a message to the operator."""
        ...

    def ask(self, question: str) -> str:
        """Show a question and return the answer line without its terminator.

        Returns an empty string at end of input.
        """
        ...


class StreamPrompt:
    """LinePrompt over a pair of text streams.

    Defaults to the process's standard streams; tests pass
    ``io.StringIO`` instances to script the operator's answers.
    """

    def __init__(self, input: TextIO | None = None, output: TextIO | None = None) -> None:
        self.input = input if input is not None else sys.stdin
        self.output = output if output is not None else sys.stdout

    def write(self, message: str) -> None:
        self.output.write(message)
        self.output.flush()

    def ask(self, question: str) -> str:
        self.write(question)
        line = self.input.readline()
        return line.rstrip("\r\n")
