from enum import Enum


class ErrorKind(Enum):
    """
    Enum of the ways a declaration or a command line can be rejected.
    """

    INVALID_ARGUMENT = 0
    MISSING_ARGUMENT = 1
    INVALID_DECLARATION = 2


class Error(RuntimeError):
    """
    Base class for every error raised while declaring or matching arguments.

    Attributes:
        kind: What went wrong.
        name: The offending alias, positional name or declaration.
    """

    kind: ErrorKind
    name: str

    def __init__(self, kind: ErrorKind, name: str, msg: str):
        super().__init__(msg)
        self.kind = kind
        self.name = name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class InvalidArgument(Error):
    """An unknown option alias, or a positional with no slot left for it."""

    def __init__(self, name: str):
        super().__init__(ErrorKind.INVALID_ARGUMENT, name, f"Invalid argument '{name}'")


class MissingArgument(Error):
    """An option without its value, or a required positional never supplied."""

    def __init__(self, name: str):
        super().__init__(
            ErrorKind.MISSING_ARGUMENT, name, f"Missing argument for '{name}'"
        )


class DeclarationError(Error):
    def __init__(self, decl: str, reason: str):
        super().__init__(
            ErrorKind.INVALID_DECLARATION,
            decl,
            f"Invalid declaration '{decl}': {reason}",
        )
