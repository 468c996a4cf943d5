"""Command line grammar — verbs and whitespace tokenization.

Pure functions, no infrastructure dependencies. A command line is a verb
followed by zero or more page-name arguments, all separated by whitespace.
Names cannot contain embedded whitespace.

Only spaces, tabs and line terminators make a line blank. Any other
whitespace-only line (form feed, vertical tab, NBSP) is an empty command.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

BLANK_CHARS = " \t\r\n"


class Verb(StrEnum):
    """Recognized command verbs, matched literally against the first token."""

    ADD_PAGES = "@addPages"
    ADD_LINKS = "@addLinks"
    IS_CONNECTED = "@isConnected"


class CommandLine(BaseModel):
    """One tokenized input line.

    Attributes:
        lineno: 1-based position of the line in the input stream.
        verb: The first token, verbatim (may not be a recognized verb).
        args: Remaining tokens in order.
    """

    model_config = {"frozen": True}

    lineno: int
    verb: str
    args: list[str] = Field(default_factory=list)

    @property
    def known_verb(self) -> Verb | None:
        """Return the matching :class:`Verb`, or None if unrecognized."""
        try:
            return Verb(self.verb)
        except ValueError:
            return None


def tokenize(text: str) -> list[str]:
    """Split *text* on any run of whitespace.

    Examples:
        >>> tokenize("  @addPages  A\\tB\\n")
        ['@addPages', 'A', 'B']
        >>> tokenize("   ")
        []
    """
    return text.split()


def is_blank(text: str) -> bool:
    """True if *text* holds nothing but spaces, tabs and line terminators."""
    return not text.strip(BLANK_CHARS)


def parse_line(text: str, lineno: int) -> CommandLine | None:
    """Tokenize *text* into a :class:`CommandLine`.

    Returns None for a blank line. A non-blank line with no tokens parses
    to an empty verb, which no :class:`Verb` matches.
    """
    if is_blank(text):
        return None
    tokens = tokenize(text)
    if not tokens:
        return CommandLine(lineno=lineno, verb="")
    return CommandLine(lineno=lineno, verb=tokens[0], args=tokens[1:])
