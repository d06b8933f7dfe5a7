import dataclasses as dt
import logging
import typing as tp

from typing import Iterator, Optional

from .errors import InvalidArgument, MissingArgument
from .scan import Scan
from .vars import Vars

_logger = logging.getLogger(__name__)

# --- Tokens ----------------------------------------------------------------- #


@dt.dataclass
class Token:
    """
    Base class for the pieces a raw command-line argument is split into.
    """

    pass


@dt.dataclass
class LongToken(Token):
    """
    An option referenced by its long alias (e.g. "opt" for "--opt").
    """

    alias: str


@dt.dataclass
class ShortToken(Token):
    """
    An option referenced by its short alias, one per character of a group
    (e.g. "x", "z" and "f" for "-xzf").
    """

    alias: str


@dt.dataclass
class OperandToken(Token):
    """
    A value for the next positional argument.
    """

    value: str


def parseArg(arg: str) -> list[Token]:
    """Splits a single raw argument into tokens."""
    s = Scan(arg)
    if s.skipStr("--"):
        return [LongToken(s.rest())]
    elif len(arg) > 1 and s.skipStr("-"):
        res = []
        while not s.eof():
            res.append(ShortToken(s.curr()))
            s.next()
        return tp.cast(list[Token], res)
    else:
        return [OperandToken(arg)]


# --- Matches ---------------------------------------------------------------- #


class Matches(tp.Mapping[str, str]):
    """
    Read-only view over what a command line matched.

    Options that do not take a value are stored with an empty string, so
    `hasMatch()` and not the value tells whether a flag was given.
    """

    _matches: dict[str, str]

    def __init__(self, matches: dict[str, str]):
        self._matches = dict(matches)

    def __getitem__(self, name: str) -> str:
        return self._matches[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._matches)

    def __len__(self) -> int:
        return len(self._matches)

    def __repr__(self) -> str:
        return f"Matches({self._matches!r})"

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:  # type: ignore[override]
        return self._matches.get(name, default)

    def hasMatch(self, name: str) -> bool:
        return name in self._matches

    def names(self) -> Iterator[str]:
        """Lazily yields every matched name, in the order they were matched."""
        yield from self._matches


def match(argv: list[str], vars: Vars) -> Matches:
    """
    Matches a command line against the declared options and arguments.

    The first element of `argv` is the program name and is skipped. An option
    taking a value consumes the token immediately after the one naming it.
    Inside a short group (e.g. `-xz a b`) each option taking a value consumes
    the next token in turn.

    Args:
        argv: The raw command line.
        vars: The declared options and arguments.

    Returns:
        The matched names and their values.

    Raises:
        InvalidArgument: On an unknown alias or an unexpected positional.
        MissingArgument: On an option without its value or a positional
            never supplied.
    """
    res: dict[str, str] = {}
    cursor = vars.cursor()
    stack = argv[1:]

    while len(stack) > 0:
        toks = parseArg(stack.pop(0))
        while len(toks) > 0:
            tok = toks.pop(0)
            if isinstance(tok, OperandToken):
                arg = cursor.popArg()
                if arg is None:
                    raise InvalidArgument(tok.value)

                _logger.debug(f"Matched argument '{arg.name}' = '{tok.value}'")
                res[arg.name] = tok.value
            elif isinstance(tok, (LongToken, ShortToken)):
                opt = vars.getOpt(tok.alias)
                if opt is None:
                    raise InvalidArgument(tok.alias)

                if opt.hasArg:
                    if len(stack) == 0:
                        raise MissingArgument(tok.alias)
                    res[opt.name] = stack.pop(0)
                else:
                    res[opt.name] = ""
                _logger.debug(f"Matched option '{opt.name}' = '{res[opt.name]}'")
            else:
                raise ValueError(f"Unexpected token: {type(tok)}")

    missing = cursor.peekArg()
    if missing is not None:
        raise MissingArgument(missing.name)

    return Matches(res)
