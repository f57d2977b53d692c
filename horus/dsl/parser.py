import re

from .tokens import TokenType
from .errors import ParseError
from .functions import get_function
from .ast_nodes import (
    NumberNode, MetricPathNode, ContextVariableNode,
    UnaryOpNode, BinaryOpNode, FunctionCallNode,
)

NUMBER_PREFIX = re.compile(r"\d*\.?\d*")


def parse_number(text):
    """Longest numeric prefix of a NUMBER token, so "1.2.3" reads as 1.2."""
    match = NUMBER_PREFIX.match(text).group()
    if not match or match == ".":
        raise ParseError(f"Invalid number: {text}")
    return float(match)


class Parser:
    """
    Recursive-descent parser with one token of lookahead.

    Expression := Term (('+' | '-') Term)*
    Term       := Factor (('*' | '/' | '%') Factor)*
    Factor     := '-' Factor | NUMBER | '(' Expression ')' | Identifier
    Identifier := IDENT '(' args ')' | IDENT '.' IDENT | IDENT
    """

    def __init__(self, tokens):
        self.tokens = tokens
        self.index = 0

    def peek(self):
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def consume(self):
        token = self.peek()
        self.index += 1
        return token

    def expect(self, type_):
        token = self.consume()
        if token is None or token.type != type_:
            got = token.type.name if token else "EOF"
            raise ParseError(f"Expected {type_.name}, got {got}")
        return token

    def _at_operator(self, symbols):
        token = self.peek()
        return token is not None and token.type == TokenType.OPERATOR and token.value in symbols

    def parse(self):
        result = self.expression()
        if self.index < len(self.tokens):
            raise ParseError(f"Unexpected token: {self.tokens[self.index].value}")
        return result

    def expression(self):
        node = self.term()

        while self._at_operator("+-"):
            op = self.consume().value
            node = BinaryOpNode(node, op, self.term())

        return node

    def term(self):
        node = self.factor()

        while self._at_operator("*/%"):
            op = self.consume().value
            node = BinaryOpNode(node, op, self.factor())

        return node

    def factor(self):
        token = self.peek()

        if token is None:
            raise ParseError("Unexpected end of expression")

        if token.type == TokenType.OPERATOR and token.value == "-":
            self.consume()
            return UnaryOpNode("-", self.factor())

        if token.type == TokenType.NUMBER:
            self.consume()
            return NumberNode(parse_number(token.value))

        if token.type == TokenType.LPAREN:
            self.consume()
            expr = self.expression()
            self.expect(TokenType.RPAREN)
            return expr

        if token.type == TokenType.IDENTIFIER:
            return self.identifier()

        raise ParseError(f"Unexpected token: {token.value}")

    def identifier(self):
        name = self.consume().value
        following = self.peek()

        # Function call?
        if following is not None and following.type == TokenType.LPAREN:
            return self.function_call(name)

        # Metric path?
        if following is not None and following.type == TokenType.DOT:
            self.expect(TokenType.DOT)
            field = self.expect(TokenType.IDENTIFIER).value
            return MetricPathNode(name, field)

        return ContextVariableNode(name)

    def function_call(self, name):
        if get_function(name) is None:
            raise ParseError(f"Unknown function: {name}")

        self.expect(TokenType.LPAREN)
        args = []
        following = self.peek()
        if following is None or following.type != TokenType.RPAREN:
            args.append(self.expression())
            while self.peek() is not None and self.peek().type == TokenType.COMMA:
                self.consume()
                args.append(self.expression())
        self.expect(TokenType.RPAREN)
        return FunctionCallNode(name, args)
