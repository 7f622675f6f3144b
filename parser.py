import re
from typing import Iterable, List, Optional, Tuple, Union

from lexer import tokenize
from ast_nodes import *

# First words that rule a line out as an assignment
KEYWORDS = frozenset({
    'IF', 'ELSEIF', 'ELSE', 'ENDIF', 'WHILE', 'ENDWHILE', 'PRINT',
    'THEN', 'AND', 'OR', 'NOT',
})

_FIRST_WORD = re.compile(r'[\s\[=]')
_NAME = re.compile(r'[A-Za-z_]\w*')
_INDEXED_NAME = re.compile(r'([A-Za-z_]\w*)\s*\[(.*)\]')

Program = Tuple[Line, ...]


def find_assignment_equals(line: str) -> int:
    """Position of the first lone ``=`` outside strings and brackets, or -1.

    ``==``, ``!=``, ``>=`` and ``<=`` are comparisons, not assignments.
    """
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == '"':
            closing = line.find('"', i + 1)
            i = n if closing == -1 else closing + 1
            continue
        if ch == '[':
            i = _skip_brackets(line, i)
            continue
        if ch == '=':
            if i + 1 < n and line[i + 1] == '=':
                i += 2
                continue
            if i > 0 and line[i - 1] in '!<>':
                i += 1
                continue
            return i
        i += 1
    return -1


def _skip_brackets(line: str, start: int) -> int:
    """Index just past the ``]`` matching the ``[`` at *start*."""
    depth = 0
    for i in range(start, len(line)):
        if line[i] == '[':
            depth += 1
        elif line[i] == ']':
            depth -= 1
            if depth == 0:
                return i + 1
    return len(line)


class ProgramParser:
    """Classifies each trimmed source line into a ``Line`` node.

    Expressions are tokenized once here; the executor re-evaluates the
    stored tokens every time control reaches the line.
    """

    def __init__(self, lines: Union[str, Iterable[str]]):
        if isinstance(lines, str):
            lines = lines.split('\n')
        self.lines = [line.rstrip('\r') for line in lines]

    def parse(self) -> Program:
        return tuple(self.parse_line(index, raw) for index, raw in enumerate(self.lines))

    def parse_line(self, index: int, raw: str) -> Line:
        text = raw.strip()

        if text == '':
            return BlankLine(index, text)
        if text == 'ENDIF':
            return EndIfLine(index, text)
        if text == 'ENDWHILE':
            return EndWhileLine(index, text)
        if text.startswith('WHILE '):
            return WhileLine(index, text, _tokens(text[6:]))
        if is_if_line(text):
            return IfLine(index, text, _tokens(text[3:-5]))
        if is_elseif_line(text):
            return ElseIfLine(index, text, _tokens(text[7:-5]))
        if text == 'ELSE':
            return ElseLine(index, text)
        if text.startswith('PRINT '):
            return PrintLine(index, text, _tokens(text[6:]))

        assignment = self._parse_assignment(index, text)
        if assignment is not None:
            return assignment
        return UnknownLine(index, text)

    def _parse_assignment(self, index: int, text: str) -> Optional[AssignLine]:
        if _FIRST_WORD.split(text, 1)[0] in KEYWORDS:
            return None
        eq = find_assignment_equals(text)
        if eq == -1:
            return None

        target = text[:eq].strip()
        value = _tokens(text[eq + 1:])
        if _NAME.fullmatch(target):
            return AssignLine(index, text, target, value)
        indexed = _INDEXED_NAME.fullmatch(target)
        if indexed:
            return AssignLine(index, text, indexed.group(1), value, _tokens(indexed.group(2)))
        return None


def is_if_line(text: str) -> bool:
    return text.startswith('IF ') and text.endswith(' THEN')


def is_elseif_line(text: str) -> bool:
    return text.startswith('ELSEIF ') and text.endswith(' THEN')


def _tokens(source: str) -> Tokens:
    return tuple(tokenize(source))


def parse_program(lines: Union[str, Iterable[str]]) -> Program:
    return ProgramParser(lines).parse()
