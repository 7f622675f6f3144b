from dataclasses import dataclass
from typing import Optional, Tuple

from lexer import Token

Tokens = Tuple[Token, ...]

@dataclass(frozen=True)
class Line:
    """Base class for one classified source line."""
    index: int
    text: str

@dataclass(frozen=True)
class BlankLine(Line):
    pass

@dataclass(frozen=True)
class EndIfLine(Line):
    pass

@dataclass(frozen=True)
class EndWhileLine(Line):
    pass

@dataclass(frozen=True)
class WhileLine(Line):
    condition: Tokens

@dataclass(frozen=True)
class IfLine(Line):
    condition: Tokens

@dataclass(frozen=True)
class ElseIfLine(Line):
    condition: Tokens

@dataclass(frozen=True)
class ElseLine(Line):
    pass

@dataclass(frozen=True)
class PrintLine(Line):
    expression: Tokens

@dataclass(frozen=True)
class AssignLine(Line):
    """``name = expr`` or, when *subscript* is set, ``name[subscript] = expr``."""
    name: str
    value: Tokens
    subscript: Optional[Tokens] = None

@dataclass(frozen=True)
class UnknownLine(Line):
    """A line of no recognised shape; executing it only advances the pc."""
    pass

# Lines that open or continue an IF chain
BRANCH_LINES = (ElseIfLine, ElseLine)
