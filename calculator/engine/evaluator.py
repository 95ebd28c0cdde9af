"""
Arithmetic evaluator for canonical expressions.

A small tokenizer plus a recursive descent parser that computes the
value while it parses. No eval, no ast module: the grammar is closed
and every failure is classified.

Grammar:
    expr    : term (("+" | "-") term)*
    term    : unary (("*" | "/") unary)*
    unary   : ("+" | "-") unary | primary
    primary : NUMBER | "(" expr ")"

All arithmetic is done on floats (IEEE 754 doubles), and any
non-finite intermediate value is an ArithmeticFailure.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

from calculator.engine.errors import ArithmeticFailure, ExpressionSyntaxError

# Deepest parenthesis nesting the parser accepts
MAX_NESTING_DEPTH = 100


class TokenType:
    """Enumeration of lexical token types."""
    NUMBER = "NUMBER"
    PLUS = "PLUS"
    MINUS = "MINUS"
    MUL = "MUL"
    DIV = "DIV"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    type: str
    text: str
    pos: int


class Tokenizer:
    """
    Converts a canonical expression into tokens.

    Numbers may omit either side of the decimal point ("5." and ".5"),
    but a lone "." is rejected.
    """
    token_specification = [
        (TokenType.NUMBER, r"\d+\.?\d*|\.\d+"),
        (TokenType.PLUS, r"\+"),
        (TokenType.MINUS, r"-"),
        (TokenType.MUL, r"\*"),
        (TokenType.DIV, r"/"),
        (TokenType.LPAREN, r"\("),
        (TokenType.RPAREN, r"\)"),
        ("MISMATCH", r"."),
    ]
    tok_regex = re.compile(
        "|".join(f"(?P<{name}>{pattern})" for name, pattern in token_specification)
    )

    def __init__(self, text: str):
        self.text = text
        self.tokens: list[Token] = self._tokenize()
        self.current = 0

    def _tokenize(self) -> list[Token]:
        tokens = []
        for match in self.tok_regex.finditer(self.text):
            kind = match.lastgroup
            if kind == "MISMATCH":
                raise ExpressionSyntaxError(
                    f"Unexpected character '{match.group()}' at position {match.start()}",
                    position=match.start(),
                )
            tokens.append(Token(kind, match.group(), match.start()))
        tokens.append(Token(TokenType.EOF, "", len(self.text)))
        return tokens

    def peek(self) -> Token:
        return self.tokens[self.current]

    def next(self) -> Token:
        token = self.tokens[self.current]
        self.current += 1
        return token

    def expect(self, type_: str) -> Token:
        token = self.peek()
        if token.type != type_:
            raise ExpressionSyntaxError(
                f"Expected {type_}, got {token.type} at position {token.pos}",
                position=token.pos,
            )
        return self.next()


class Parser:
    """
    Recursive descent parser that evaluates as it goes.

    Binary operators of equal precedence associate left to right.
    Parentheses may nest at most `max_depth` levels; deeper input is a
    syntax error rather than a RecursionError.
    """

    def __init__(self, tokenizer: Tokenizer, max_depth: int = MAX_NESTING_DEPTH):
        self.tokenizer = tokenizer
        self.max_depth = max_depth
        self.depth = 0

    def parse(self) -> float:
        """Parse the whole input and return its value."""
        value = self.expr()
        token = self.tokenizer.peek()
        if token.type != TokenType.EOF:
            raise ExpressionSyntaxError(
                f"Unexpected '{token.text}' at position {token.pos}",
                position=token.pos,
            )
        return value

    def expr(self) -> float:
        value = self.term()
        while self.tokenizer.peek().type in (TokenType.PLUS, TokenType.MINUS):
            op = self.tokenizer.next()
            right = self.term()
            value = _checked(value + right if op.type == TokenType.PLUS else value - right)
        return value

    def term(self) -> float:
        value = self.unary()
        while self.tokenizer.peek().type in (TokenType.MUL, TokenType.DIV):
            op = self.tokenizer.next()
            right = self.unary()
            if op.type == TokenType.MUL:
                value = _checked(value * right)
            else:
                if right == 0:
                    raise ArithmeticFailure("Division by zero")
                value = _checked(value / right)
        return value

    def unary(self) -> float:
        negate = False
        while self.tokenizer.peek().type in (TokenType.PLUS, TokenType.MINUS):
            if self.tokenizer.next().type == TokenType.MINUS:
                negate = not negate
        value = self.primary()
        return -value if negate else value

    def primary(self) -> float:
        token = self.tokenizer.peek()
        if token.type == TokenType.NUMBER:
            self.tokenizer.next()
            return _checked(float(token.text))
        if token.type == TokenType.LPAREN:
            self.tokenizer.next()
            if self.depth >= self.max_depth:
                raise ExpressionSyntaxError(
                    f"Parentheses nested deeper than {self.max_depth} levels",
                    position=token.pos,
                )
            self.depth += 1
            value = self.expr()
            self.depth -= 1
            self.tokenizer.expect(TokenType.RPAREN)
            return value
        found = "end of input" if token.type == TokenType.EOF else f"'{token.text}'"
        raise ExpressionSyntaxError(
            f"Expected a number or '(', got {found} at position {token.pos}",
            position=token.pos,
        )


def _checked(value: float) -> float:
    if not math.isfinite(value):
        raise ArithmeticFailure("Result is not a finite number")
    return value


def evaluate_canonical(canonical: str) -> Optional[float]:
    """
    Evaluate a sanitized expression.

    Returns None for an empty expression (the caller shows the neutral
    value); otherwise a finite float.

    Raises:
        ExpressionSyntaxError: If the text is not valid arithmetic
        ArithmeticFailure: On division by zero or overflow
    """
    if not canonical:
        return None
    return Parser(Tokenizer(canonical)).parse()
