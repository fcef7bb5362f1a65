"""
Extended glob to regular expression compiler.

Special characters:

    /**/   - match zero or more directories
    {a,b}  - match a or b, no spaces
    *      - match any run of non-separator chars
    ?      - match a single char
    [...]  - character class, passed through to the regex
    **/    - match any directory prefix
    /**    - match everything inside this directory, end of pattern only

Negation (`!`) is handled by the caller; here `!` is just a literal.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# Any run of non-separator characters.
ANY_RUNE = "[^/]*"
# Zero or more whole directory segments, used by `**` forms.
ZERO_OR_MORE_DIRECTORIES = r"((?:[\w.\-]+/)*)"
SLASH_STAR_STAR_SLASH = "/**/"
TRAILING_STAR_STAR = "/**"
STAR_STAR_SLASH = "**/"

# Regex metacharacters that are literal in a glob.
_ESCAPED = frozenset("\\$^+.()=!|")


def _translate_slash(glob: str, i: int, in_group: bool) -> tuple[str, int, bool]:
    if glob.startswith(SLASH_STAR_STAR_SLASH, i):
        return "/" + ZERO_OR_MORE_DIRECTORIES, len(SLASH_STAR_STAR_SLASH), in_group
    if glob[i:] == TRAILING_STAR_STAR:
        return "/.*", len(TRAILING_STAR_STAR), in_group
    return "/", 1, in_group


def _translate_star(glob: str, i: int, in_group: bool) -> tuple[str, int, bool]:
    if glob.startswith(STAR_STAR_SLASH, i):
        return ZERO_OR_MORE_DIRECTORIES, len(STAR_STAR_SLASH), in_group
    return ANY_RUNE, 1, in_group


def _translate_comma(glob: str, i: int, in_group: bool) -> tuple[str, int, bool]:
    return ("|" if in_group else "\\,"), 1, in_group


def _open_group(glob: str, i: int, in_group: bool) -> tuple[str, int, bool]:
    return "(", 1, True


def _close_group(glob: str, i: int, in_group: bool) -> tuple[str, int, bool]:
    return ")", 1, False


def _single_char(glob: str, i: int, in_group: bool) -> tuple[str, int, bool]:
    return ".", 1, in_group


# Each handler returns (emitted regex text, input chars consumed, in_group).
_HANDLERS = {
    "/": _translate_slash,
    "*": _translate_star,
    ",": _translate_comma,
    "{": _open_group,
    "}": _close_group,
    "?": _single_char,
}


def glob_to_regex(glob: str) -> str:
    """
    Translate an extended glob into the text of an anchored regular expression.
    Longer constructs (`/**/`, trailing `/**`, `**/`) win over a plain `*` and
    the scan advances past the whole construct.
    """
    parts = ["^"]
    i, in_group = 0, False
    while i < len(glob):
        c = glob[i]
        handler = _HANDLERS.get(c)
        if handler is not None:
            text, width, in_group = handler(glob, i, in_group)
        elif c in _ESCAPED:
            text, width = "\\" + c, 1
        else:
            # Includes `[` and `]`, so character classes work natively.
            text, width = c, 1
        parts.append(text)
        i += width
    parts.append("$")
    return "".join(parts)


def compile_pattern(glob: str) -> re.Pattern[str]:
    """
    Compile an extended glob into an anchored regular expression.

    Never raises: a glob whose translation is not a valid regex (an unbalanced
    `[` or `{`, say) compiles to an expression matching the glob text literally.
    """
    source = glob_to_regex(glob)
    try:
        regex = re.compile(source)
    except re.error as e:
        logger.debug("Glob %r is not a valid expression (%s), matching it literally", glob, e)
        regex = re.compile("^" + re.escape(glob) + "$")
    logger.debug("Compiled glob %r to %s", glob, regex.pattern)
    return regex
