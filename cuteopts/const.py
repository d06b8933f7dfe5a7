import os

VERSION = (0, 2, 0)
VERSION_STR = f"{VERSION[0]}.{VERSION[1]}.{VERSION[2]}{'-' +  str(VERSION[-1]) if len(VERSION) > 3 else ''}"


ARGV0 = "cuteopts"
DESCRIPTION = "A small command-line arguments matcher with a compact declaration syntax"

# Declaration syntax
HEADING_PREFIX = "#"
ARG_PREFIX = ":"
ALIAS_SEP = "/"
DESC_SEP = "#"
HAS_ARG_SUFFIX = ":"

# Output of the command-line tool
FORMATS = ("env", "json", "lines")
FORMAT_ENV = "CUTEOPTS_FORMAT"
DEFAULT_FORMAT = "env"
