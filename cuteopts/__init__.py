import json
import logging
import os
import re
import shlex
import sys

from typing import Optional

from . import const, vt100
from .errors import (
    DeclarationError,
    Error,
    ErrorKind,
    InvalidArgument,
    MissingArgument,
)
from .matches import LongToken, Matches, ShortToken, match, parseArg
from .vars import Arg, Heading, Opt, Vars, declare, parseArgDecl, parseDecl

__all__ = [
    "Arg",
    "DeclarationError",
    "Error",
    "ErrorKind",
    "Heading",
    "InvalidArgument",
    "Matches",
    "MissingArgument",
    "Opt",
    "Vars",
    "declare",
    "main",
    "match",
    "parseArgDecl",
    "parseDecl",
]

_logger = logging.getLogger(__name__)


class logger:
    @staticmethod
    def setup(verbose: bool):
        if verbose:
            logging.basicConfig(
                level=logging.DEBUG,
                format=f"{vt100.CYAN}%(asctime)s{vt100.RESET} {vt100.YELLOW}%(levelname)s{vt100.RESET} %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        else:
            logging.basicConfig(level=logging.WARNING, handlers=[logging.NullHandler()])


CLI = declare(
    const.ARGV0,
    [
        "s/schema#File holding one declaration per line, '-' reads standard input:",
        "f/format#Output format, one of env, json or lines:",
        "H/schema-help#Show the help page generated from the schema",
        "v/verbose#Enable verbose logging",
        "V/version#Show current version",
        "h/help#Show this help",
    ],
    description=f"{const.DESCRIPTION}. Everything after '--' is matched "
    "against the schema, starting with the program name.",
)


def loadSchema(path: str) -> list[str]:
    """Reads declarations from a file, skipping blank lines."""
    if path == "-":
        text = sys.stdin.read()
    else:
        with open(path, "r") as f:
            text = f.read()
    return [line for line in text.splitlines() if line.strip()]


def envName(name: str) -> str:
    return re.sub(r"\W", "_", name).upper()


def render(result: Matches, format: str) -> str:
    if format == "json":
        return json.dumps(dict(result), indent=4)
    elif format == "lines":
        return "\n".join(f"{name}={value}" for name, value in result.items())
    elif format == "env":
        return "\n".join(
            f"{envName(name)}={shlex.quote(value)}" for name, value in result.items()
        )
    raise InvalidArgument(format)


def isVerbose(argv: list[str]) -> bool:
    """Tells whether the tool's own arguments ask for verbose logging."""
    for arg in argv[1:]:
        for tok in parseArg(arg):
            if tok == ShortToken("v") or tok == LongToken("verbose"):
                return True
    return False


def _splitArgv(argv: list[str]) -> tuple[list[str], list[str]]:
    if "--" not in argv:
        return argv[:], []
    i = argv.index("--")
    return argv[:i], argv[i + 1 :]


def main(argv: Optional[list[str]] = None) -> int:
    own, rest = _splitArgv(sys.argv if argv is None else argv)
    usage = CLI.usage()
    logger.setup(isVerbose(own))

    try:
        args = match(own, CLI)

        if args.hasMatch("help"):
            CLI.help()
            return 0

        if args.hasMatch("version"):
            print(f"cuteopts v{const.VERSION_STR}")
            return 0

        path = args.get("schema")
        if path is None:
            raise MissingArgument("schema")

        format = args.get("format", os.environ.get(const.FORMAT_ENV, const.DEFAULT_FORMAT))
        if format not in const.FORMATS:
            raise InvalidArgument(format)

        prog = os.path.basename(rest[0]) if rest else "program"
        schema = declare(prog, loadSchema(path))
        _logger.info(f"Loaded {len(schema.decls)} declarations from '{path}'")
        usage = schema.usage()

        if args.hasMatch("schema-help"):
            schema.help()
            return 0

        print(render(match(rest, schema), format))
        return 0

    except Error as e:
        logging.exception(e)
        vt100.error(str(e))
        print(f"Usage: {usage}", end="\n\n", file=sys.stderr)
        return 1

    except OSError as e:
        logging.exception(e)
        vt100.error(f"Could not read schema: {e}")
        return 1

    except KeyboardInterrupt:
        print()
        return 1
