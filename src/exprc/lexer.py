"""
Expression Lexer (Scanner)
==========================

This module converts expression source text into a stream of tokens
for the parser.

Token Categories
----------------
| Category  | Lexeme        |
|-----------|---------------|
| INT       | digit run     |
| PLUS      | +             |
| TIMES     | *             |
| POW       | ^             |
| OPEN_PAR  | (             |
| CLOSE_PAR | )             |
| BAD_TOKEN | any other char|
| EOF       | (none)        |

Whitespace produces no token. Any character that is not part of the
language becomes a single-character BAD_TOKEN; the lexer never raises.
It is the parser that rejects BAD_TOKEN, since no production accepts it.

Example Usage
-------------
>>> from exprc.lexer import Lexer
>>> for token in Lexer("2 + 3").tokenize():
...     print(token)
[INT, "2"]
[PLUS, "+"]
[INT, "3"]
[EOF, None]
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import logging
import re


logger = logging.getLogger(__name__)


# =============================================================================
# Token Category Enumeration
# =============================================================================

class TokenCategory(Enum):
    """Token categories of the expression language."""

    INT = auto()            # Decimal integer literal
    PLUS = auto()           # +
    TIMES = auto()          # *
    POW = auto()            # ^
    OPEN_PAR = auto()       # (
    CLOSE_PAR = auto()      # )
    EOF = auto()            # End of input
    BAD_TOKEN = auto()      # Any character outside the language


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of expression source.

    Attributes:
        category: The TokenCategory classification
        lexeme: The exact matched text, or None for EOF
    """
    category: TokenCategory
    lexeme: Optional[str]

    def __str__(self) -> str:
        if self.lexeme is None:
            return f"[{self.category.name}, None]"
        return f'[{self.category.name}, "{self.lexeme}"]'


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes expression source text.

    Alternatives are tried in a fixed priority order at each position:
    digit run, '+', '*', '^', '(', ')', whitespace, any single character.
    The last alternative guarantees progress, so the whole input is always
    consumed and a malformed run is reported one character at a time.

    Usage:
        tokens = list(Lexer("2 * (3 + 4)").tokenize())
    """

    # Order matters: the first group that matches wins.
    TOKEN_PATTERN = re.compile(
        r"(?P<INT>[0-9]+)"
        r"|(?P<PLUS>\+)"
        r"|(?P<TIMES>\*)"
        r"|(?P<POW>\^)"
        r"|(?P<OPEN_PAR>\()"
        r"|(?P<CLOSE_PAR>\))"
        r"|(?P<WHITESPACE>\s)"
        r"|(?P<BAD_TOKEN>.)",
        re.DOTALL,
    )

    def __init__(self, source: str):
        self.source = source

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source text.

        Yields:
            Token objects, always terminated by exactly one EOF token
        """
        for match in self.TOKEN_PATTERN.finditer(self.source):
            kind = match.lastgroup
            if kind == "WHITESPACE":
                continue
            if kind == "BAD_TOKEN":
                logger.debug("Unrecognized character %r at offset %d", match.group(), match.start())
            yield Token(TokenCategory[kind], match.group())

        yield Token(TokenCategory.EOF, None)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str) -> list[Token]:
    """Tokenize source text into a list of tokens ending in EOF."""
    return list(Lexer(source).tokenize())
