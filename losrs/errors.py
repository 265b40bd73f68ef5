"""Error types raised by the card engine."""


class LosrsError(Exception):
    """Base class for recoverable errors reported to the caller."""


class ParseError(LosrsError):
    def __init__(self, message: str, line: int):
        self.message = message
        self.line = line
        super().__init__(f"line {line}: {message}")


class NotFoundError(LosrsError):
    def __init__(self, prompt: str):
        self.prompt = prompt
        super().__init__(f"No card with prompt {prompt!r} in document")


class ValidationError(LosrsError):
    def __init__(self, message: str, line: int | None = None):
        self.message = message
        self.line = line
        if line is None:
            super().__init__(message)
        else:
            super().__init__(f"line {line}: {message}")
