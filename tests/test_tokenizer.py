import pytest

from horus.dsl import ParseError, Token, TokenType, tokenize


def test_tokenizes_metric_path():
    assert tokenize("leftLeg.peakFlexion") == [
        Token(TokenType.IDENTIFIER, "leftLeg"),
        Token(TokenType.DOT, "."),
        Token(TokenType.IDENTIFIER, "peakFlexion"),
    ]


def test_tokenizes_function_call_with_operators():
    tokens = tokenize("max(a, 2.5) % -3")
    assert [t.type for t in tokens] == [
        TokenType.IDENTIFIER, TokenType.LPAREN, TokenType.IDENTIFIER, TokenType.COMMA,
        TokenType.NUMBER, TokenType.RPAREN, TokenType.OPERATOR, TokenType.OPERATOR,
        TokenType.NUMBER,
    ]
    assert [t.value for t in tokens] == ["max", "(", "a", ",", "2.5", ")", "%", "-", "3"]


def test_whitespace_produces_no_tokens():
    assert tokenize("  \t\n ") == []
    assert tokenize("") == []


def test_unknown_characters_are_skipped():
    # a$b lexes as two identifiers; the $ yields nothing
    assert tokenize("a$b") == [
        Token(TokenType.IDENTIFIER, "a"),
        Token(TokenType.IDENTIFIER, "b"),
    ]


def test_number_run_keeps_every_dot():
    assert tokenize("1.2.3") == [Token(TokenType.NUMBER, "1.2.3")]


def test_numbers_have_no_sign_or_exponent():
    assert tokenize("-1e5") == [
        Token(TokenType.OPERATOR, "-"),
        Token(TokenType.NUMBER, "1"),
        Token(TokenType.IDENTIFIER, "e5"),
    ]


def test_identifiers_allow_underscores_and_digits():
    assert tokenize("_left_2") == [Token(TokenType.IDENTIFIER, "_left_2")]


def test_strict_mode_rejects_unknown_characters():
    with pytest.raises(ParseError, match=r"Unexpected character: \$"):
        tokenize("a$b", strict=True)


def test_tokenize_is_deterministic():
    formula = "(current - baseline) / baseline * 100"
    assert tokenize(formula) == tokenize(formula)
