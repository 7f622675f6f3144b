"""
Expression evaluator for the trace-table pseudocode dialect.

Recursive descent with one method per precedence tier; values are computed
while parsing, so no expression tree is kept. Lowest to highest:

    OR
    AND
    NOT (unary)
    == != > < >= <=
    + -
    * / %
    - (unary)
    atoms: number, string, boolean, ( ), [a, b, ...], name, name[index]
"""
import logging
from typing import List, Optional

from lexer import Token, TokenType, tokenize
from values import (ARITHMETIC_OPS, COMPARISON_OPS, is_truthy, negate)
from variable_store import VariableStore

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class Evaluator:
    def __init__(self, tokens: List[Token], store: VariableStore):
        self.tokens = tokens
        self.store = store
        self.pos = 0

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def advance(self) -> Optional[Token]:
        token = self.peek()
        self.pos += 1
        return token

    def match_op(self, *ops: str) -> Optional[str]:
        token = self.peek()
        if token is not None and token.is_op(*ops):
            self.advance()
            return token.value
        return None

    def match_keyword(self, keyword: str) -> bool:
        token = self.peek()
        if token is not None and token.is_keyword(keyword):
            self.advance()
            return True
        return False

    def match_bracket(self, bracket: str) -> bool:
        token = self.peek()
        if token is not None and token.is_bracket(bracket):
            self.advance()
            return True
        return False

    # ── Precedence tiers ──

    def evaluate(self):
        try:
            return self.parse_or()
        except RecursionError:
            # nesting deeper than the Python stack allows
            logger.warning("Expression nested too deeply; evaluating to 0")
            self.pos = len(self.tokens)
            return 0

    def parse_or(self):
        left = self.parse_and()
        while self.match_keyword('OR'):
            right = self.parse_and()
            left = is_truthy(left) or is_truthy(right)
        return left

    def parse_and(self):
        left = self.parse_not()
        while self.match_keyword('AND'):
            right = self.parse_not()
            left = is_truthy(left) and is_truthy(right)
        return left

    def parse_not(self):
        if self.match_keyword('NOT'):
            return not is_truthy(self.parse_not())
        return self.parse_comparison()

    def parse_comparison(self):
        left = self.parse_additive()
        while True:
            op = self.match_op(*COMPARISON_OPS)
            if op is None:
                return left
            right = self.parse_additive()
            left = COMPARISON_OPS[op](left, right)

    def parse_additive(self):
        left = self.parse_multiplicative()
        while True:
            op = self.match_op('+', '-')
            if op is None:
                return left
            left = ARITHMETIC_OPS[op](left, self.parse_multiplicative())

    def parse_multiplicative(self):
        left = self.parse_unary()
        while True:
            op = self.match_op('*', '/', '%')
            if op is None:
                return left
            left = ARITHMETIC_OPS[op](left, self.parse_unary())

    def parse_unary(self):
        if self.match_op('-'):
            return negate(self.parse_unary())
        return self.parse_atom()

    def parse_atom(self):
        token = self.peek()
        if token is None:
            return 0

        if token.type in (TokenType.NUMBER, TokenType.STRING, TokenType.BOOLEAN):
            self.advance()
            return token.value

        if token.is_bracket('('):
            self.advance()
            value = self.parse_or()
            self.match_bracket(')')
            return value

        if token.is_bracket('['):
            self.advance()
            return self._parse_array_literal()

        if token.type == TokenType.IDENTIFIER:
            self.advance()
            return self._parse_variable(token.value)

        # Stray operator or bracket in atom position
        self.advance()
        return 0

    def _parse_array_literal(self) -> list:
        """Parse ``[e, e, ...]`` after the opening bracket."""
        items = []
        while self.peek() is not None and not self.peek().is_bracket(']'):
            items.append(self.parse_or())
            self.match_bracket(',')
        self.match_bracket(']')
        return items

    def _parse_variable(self, name: str):
        if self.match_bracket('['):
            index = self.parse_or()
            self.match_bracket(']')
            return self.store.read_index(name, index)
        value = self.store.get(name)
        return 0 if value is None else value


def evaluate(tokens: List[Token], store: VariableStore):
    return Evaluator(tokens, store).evaluate()


def evaluate_source(source: str, store: Optional[VariableStore] = None):
    """Tokenize and evaluate one expression string."""
    if store is None:
        store = VariableStore()
    return evaluate(tokenize(source), store)
