import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, List

class TokenType(Enum):
    NUMBER = auto()
    STRING = auto()
    BOOLEAN = auto()
    IDENTIFIER = auto()
    KEYWORD = auto()     # AND, OR, NOT
    OPERATOR = auto()
    BRACKET = auto()     # ( ) [ ] ,

@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Any

    def is_op(self, *values) -> bool:
        return self.type == TokenType.OPERATOR and self.value in values

    def is_keyword(self, value) -> bool:
        return self.type == TokenType.KEYWORD and self.value == value

    def is_bracket(self, value) -> bool:
        return self.type == TokenType.BRACKET and self.value == value

class Lexer:
    """Tokenizer for a single expression.

    Lexing is lenient: a character no pattern accepts is dropped and
    scanning resumes at the next one. Tokens carry no positions; the
    executor tracks which line an expression came from.
    """
    # ORDER IS SEMANTIC: earlier patterns win in the alternation
    TOKEN_SPECS = [
        ('WHITESPACE', r'\s+'),
        ('STRING', r'"[^"]*"?'),                 # unterminated runs to end of input
        ('NUMBER', r'\d+(?:\.\d*)?'),            # at most one decimal point
        ('IDENTIFIER', r'[A-Za-z_][A-Za-z0-9_]*'),
        ('OPERATOR2', r'==|!=|>=|<='),           # MUST precede OPERATOR
        ('OPERATOR', r'[-+*/%><=]'),
        ('BRACKET', r'[()\[\],]'),
    ]

    KEYWORDS = frozenset({'AND', 'OR', 'NOT'})
    BOOLEANS = {'true': True, 'false': False}

    _MASTER_REGEX = re.compile('|'.join(f'(?P<{name}>{regex})' for name, regex in TOKEN_SPECS))

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        while self.pos < len(self.source):
            match = self._MASTER_REGEX.match(self.source, self.pos)
            if not match:
                self.pos += 1
                continue

            kind = match.lastgroup
            value = match.group()
            self.pos = match.end()

            if kind == 'WHITESPACE':
                continue
            self.tokens.append(self._create_token(kind, value))
        return self.tokens

    def _create_token(self, kind: str, value: str) -> Token:
        if kind == 'IDENTIFIER':
            if value in self.KEYWORDS:
                return Token(TokenType.KEYWORD, value)
            if value in self.BOOLEANS:
                return Token(TokenType.BOOLEAN, self.BOOLEANS[value])
            return Token(TokenType.IDENTIFIER, value)

        if kind == 'NUMBER':
            if '.' in value:
                return Token(TokenType.NUMBER, float(value))
            try:
                return Token(TokenType.NUMBER, int(value))
            except ValueError:
                # digit run past the interpreter's int conversion limit
                return Token(TokenType.NUMBER, float(value))
        if kind == 'STRING':
            body = value[1:]
            if body.endswith('"'):
                body = body[:-1]
            return Token(TokenType.STRING, body)
        if kind in ('OPERATOR', 'OPERATOR2'):
            return Token(TokenType.OPERATOR, value)
        return Token(TokenType.BRACKET, value)


def tokenize(source: str) -> List[Token]:
    return Lexer(source).tokenize()


if __name__ == "__main__":
    for t in tokenize('items[i] == target AND NOT found'):
        print(t)
