import string

from .errors import ParseError
from .tokens import Token, TokenType

DIGITS = frozenset(string.digits)
IDENT_START = frozenset(string.ascii_letters + "_")
IDENT_CHARS = IDENT_START | DIGITS
OPERATORS = frozenset("+-*/%")
PUNCTUATION = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
}


class Tokenizer:
    """
    Single left-to-right scan of a formula string.

    Characters that start no token are skipped unless ``strict`` is set,
    in which case they raise a ParseError.
    """

    def __init__(self, text, strict=False):
        self.text = text or ""
        self.strict = strict
        self.pos = 0
        self.current = self.text[0] if self.text else None

    def advance(self):
        self.pos += 1
        self.current = self.text[self.pos] if self.pos < len(self.text) else None

    def skip_spaces(self):
        while self.current and self.current.isspace():
            self.advance()

    def number(self):
        # Dots are swallowed into the run; "1.2.3" stays one NUMBER token
        start = self.pos
        while self.current and (self.current in DIGITS or self.current == '.'):
            self.advance()
        return Token(TokenType.NUMBER, self.text[start:self.pos])

    def identifier(self):
        start = self.pos
        while self.current and self.current in IDENT_CHARS:
            self.advance()
        return Token(TokenType.IDENTIFIER, self.text[start:self.pos])

    def generate_tokens(self):
        tokens = []
        while self.current:
            if self.current.isspace():
                self.skip_spaces()
                continue

            if self.current in DIGITS:
                tokens.append(self.number())
                continue

            if self.current in IDENT_START:
                tokens.append(self.identifier())
                continue

            if self.current in OPERATORS:
                tokens.append(Token(TokenType.OPERATOR, self.current))
            elif self.current in PUNCTUATION:
                tokens.append(Token(PUNCTUATION[self.current], self.current))
            elif self.strict:
                raise ParseError(f"Unexpected character: {self.current}")

            self.advance()

        return tokens


def tokenize(expression, strict=False):
    """Lex ``expression`` into a flat list of tokens."""
    return Tokenizer(expression, strict=strict).generate_tokens()
