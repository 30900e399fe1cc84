"""Errors raised while talking to the ichiran command-line tool."""


class IchiranError(Exception):
    """Base class of every ichiran failure."""


class ProcessFailure(IchiranError):
    """The ichiran command exited unsuccessfully."""

    def __init__(self, status, stderr: str) -> None:
        self.status = status
        self.stderr = stderr
        super().__init__(f"ichiran-cli exited w/ {status}\n{stderr}")


class ParseError(IchiranError):
    """Output of the ichiran command could not be understood."""

    def __init__(self, output: str) -> None:
        self.output = output
        super().__init__(f"Parse Error:\n{output}")


class LispError(IchiranError):
    """A Lisp expression could not be read or evaluated."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Lisp Error:\n{message}")