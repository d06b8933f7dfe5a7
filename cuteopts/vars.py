import dataclasses as dt
import logging

from typing import Iterable, Optional, Union

from . import const, vt100
from .errors import DeclarationError
from .scan import Scan

_logger = logging.getLogger(__name__)

# --- Declarations ----------------------------------------------------------- #


@dt.dataclass(frozen=True)
class Opt:
    """
    An option reachable through a short and/or a long alias.

    Attributes:
        short: The single character alias (e.g. "o" for "-o").
        long: The word alias (e.g. "opt" for "--opt").
        hasArg: True if the option consumes the token following it.
        description: Text shown in the help page.
    """

    short: Optional[str]
    long: Optional[str]
    hasArg: bool = False
    description: str = ""

    @property
    def name(self) -> str:
        """The key under which a match of this option is stored."""
        name = self.long or self.short
        assert name
        return name

    def aliases(self) -> list[str]:
        return [a for a in (self.short, self.long) if a]

    def flag(self) -> str:
        flag = ""
        if self.short:
            flag += f"-{self.short}"

        if self.long:
            if flag:
                flag += ", "
            flag += f"--{self.long}"

        if self.hasArg:
            flag += f" <{self.name}>"
        return flag


@dt.dataclass(frozen=True)
class Arg:
    """
    A required positional argument, matched by its place on the command line.
    """

    name: str
    description: str = ""

    def flag(self) -> str:
        return f"<{self.name}>"


@dt.dataclass(frozen=True)
class Heading:
    """Groups the declarations following it in the help page."""

    title: str


Decl = Union[Opt, Arg, Heading]


def _checkAlias(decl: str, alias: str, short: bool):
    if short and len(alias) != 1:
        raise DeclarationError(decl, f"short alias '{alias}' must be one character")

    if alias.startswith("-"):
        raise DeclarationError(decl, f"alias '{alias}' must not start with '-'")

    if any(c.isspace() or c in (const.ALIAS_SEP, const.HAS_ARG_SUFFIX) for c in alias):
        raise DeclarationError(decl, f"alias '{alias}' contains an invalid character")


def _parseAliases(decl: str, s: Scan) -> tuple[Optional[str], Optional[str]]:
    first = s.until(const.ALIAS_SEP).strip()
    if s.skipStr(const.ALIAS_SEP):
        short, long = first, s.rest().strip()
    elif len(first) == 1:
        short, long = first, ""
    else:
        short, long = "", first

    if not short and not long:
        raise DeclarationError(decl, "expected a short or a long alias")

    if short:
        _checkAlias(decl, short, True)
    if long:
        _checkAlias(decl, long, False)

    return short or None, long or None


def parseArgDecl(decl: str) -> Arg:
    """
    Parses a positional declaration of the form `name#description`.

    Raises:
        DeclarationError: If the name is empty or looks like an option.
    """
    s = Scan(decl)
    name = s.until(const.DESC_SEP).strip()
    description = s.rest()[len(const.DESC_SEP) :].strip()

    if not name:
        raise DeclarationError(decl, "expected an argument name")

    if name.startswith("-"):
        raise DeclarationError(decl, f"argument '{name}' must not start with '-'")

    return Arg(name, description)


def parseDecl(decl: str) -> Decl:
    """
    Parses a single declaration.

    `short/long#description` declares an option, a trailing `:` makes it
    consume a value. `:name#description` declares a positional argument and
    `#title` starts a new section of the help page.

    Args:
        decl: The declaration to parse.

    Returns:
        An `Opt`, an `Arg` or a `Heading`.

    Raises:
        DeclarationError: If the declaration is malformed.
    """
    s = Scan(decl.strip())

    if s.skipStr(const.HEADING_PREFIX):
        return Heading(s.rest().strip())

    if s.skipStr(const.ARG_PREFIX):
        return parseArgDecl(s.rest())

    aliases = s.until(const.DESC_SEP)
    description = ""
    if s.skipStr(const.DESC_SEP):
        description = s.rest()

    hasArg = False
    if description.endswith(const.HAS_ARG_SUFFIX):
        description = description[: -len(const.HAS_ARG_SUFFIX)]
        hasArg = True
    aliases = aliases.rstrip()
    if aliases.endswith(const.HAS_ARG_SUFFIX):
        aliases = aliases[: -len(const.HAS_ARG_SUFFIX)]
        hasArg = True

    short, long = _parseAliases(decl, Scan(aliases))
    return Opt(short, long, hasArg, description.strip())


# --- Registry --------------------------------------------------------------- #


class Cursor:
    """
    The positional arguments still waiting for a value during one match.
    """

    _pending: list[Arg]

    def __init__(self, args: Iterable[Arg]):
        self._pending = list(args)

    def popArg(self) -> Optional[Arg]:
        """Removes and returns the next positional, in declaration order."""
        if len(self._pending) == 0:
            return None

        first = self._pending[0]
        del self._pending[0]
        return first

    def peekArg(self) -> Optional[Arg]:
        if len(self._pending) == 0:
            return None
        return self._pending[0]

    def argLen(self) -> int:
        return len(self._pending)


class Vars:
    """
    The options and positional arguments a program accepts.

    A `Vars` is never modified by matching, each match works on its own
    `Cursor`.
    """

    name: str
    description: str
    decls: list[Decl]
    opts: dict[str, Opt]
    args: list[Arg]

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self.decls = []
        self.opts = {}
        self.args = []
        self._names: set[str] = set()

    def _claim(self, name: str, decl: Decl):
        if name in self._names:
            raise DeclarationError(repr(decl), f"'{name}' is already declared")
        self._names.add(name)

    def add(self, decl: Decl) -> "Vars":
        """Registers a parsed declaration."""
        if isinstance(decl, Opt):
            for alias in decl.aliases():
                if alias in self.opts:
                    raise DeclarationError(
                        decl.flag(), f"alias '{alias}' is already declared"
                    )
            self._claim(decl.name, decl)
            for alias in decl.aliases():
                self.opts[alias] = decl
        elif isinstance(decl, Arg):
            self._claim(decl.name, decl)
            self.args.append(decl)

        _logger.debug(f"Declared {decl} on '{self.name}'")
        self.decls.append(decl)
        return self

    def getOpt(self, alias: str) -> Optional[Opt]:
        """Looks up an option by its short or long alias."""
        return self.opts.get(alias)

    def containsOpt(self, alias: str) -> bool:
        return alias in self.opts

    def cursor(self) -> Cursor:
        """Returns a fresh queue of every declared positional argument."""
        return Cursor(self.args)

    def usage(self) -> str:
        """Returns a one-line usage string."""
        res = self.name
        for decl in self.decls:
            if isinstance(decl, Opt):
                res += f" [{decl.flag()}]"
        for arg in self.args:
            res += f" {arg.flag()}"
        return res

    def help(self):
        """Prints the help page."""
        vt100.title(self.name)
        print()

        vt100.subtitle("Usage")
        print(vt100.indent(self.usage()))
        print()

        if self.description:
            vt100.subtitle("Description")
            print(vt100.indent(vt100.wordwrap(self.description)))
            print()

        # None before any section, the title of an implicit one, "" under a heading
        section: Optional[str] = None
        for decl in self.decls:
            if isinstance(decl, Heading):
                if section is not None:
                    print()
                vt100.subtitle(decl.title)
                section = ""
                continue

            kind = "Options" if isinstance(decl, Opt) else "Arguments"
            if section is None or (section and section != kind):
                if section is not None:
                    print()
                vt100.subtitle(kind)
                section = kind

            print(vt100.indent(vt100.option(decl.flag(), decl.description)))

        if section is not None:
            print()


def declare(
    name: str,
    decls: Iterable[str],
    args: Iterable[str] = (),
    description: str = "",
) -> Vars:
    """
    Builds a `Vars` from declaration strings.

    Args:
        name: The program name shown in usage and help.
        decls: Option declarations, which may also hold `:name` positionals
            and `#title` headings.
        args: Positional declarations of the form `name#description`.
        description: Text shown in the help page.

    Raises:
        DeclarationError: If a declaration is malformed or declared twice.
    """
    res = Vars(name, description)
    for decl in decls:
        res.add(parseDecl(decl))

    args = list(args)
    if args:
        res.add(Heading("Arguments"))
        for arg in args:
            res.add(parseArgDecl(arg))

    return res
