import pytest
from hypothesis import given
from hypothesis import strategies as st

from niftel.niftel_constants import (
    TOKEN_KINDS,
    double_char_tokens,
    keyword_tokens,
    literal_keywords,
    single_char_tokens,
)
from niftel.niftel_lexer import CharacterStream, Lexer, Token, scan


def kinds(source: str) -> list[str]:
    return [tok.kind for tok in scan(source)]


@pytest.mark.parametrize("lexeme,kind", sorted(single_char_tokens.items()))  # type: ignore[misc]
def test_single_char_tokens(lexeme: str, kind: str) -> None:
    tokens = scan(lexeme)
    assert tokens == [Token(kind, lexeme), Token("EOF", "")]
    assert tokens[0].literal is None


@pytest.mark.parametrize("lexeme,kind", sorted(double_char_tokens.items()))  # type: ignore[misc]
def test_double_char_tokens(lexeme: str, kind: str) -> None:
    assert scan(lexeme) == [Token(kind, lexeme), Token("EOF", "")]


@pytest.mark.parametrize(  # type: ignore[misc]
    "lexeme,kind", sorted({**keyword_tokens, **literal_keywords}.items())
)
def test_reserved_word_tokens(lexeme: str, kind: str) -> None:
    tok = scan(lexeme)[0]
    assert tok.kind == kind
    assert tok.lexeme == lexeme
    assert tok.literal is None


def test_every_reserved_word_has_its_own_kind() -> None:
    assert len(set(keyword_tokens.values())) == len(keyword_tokens)
    assert "IDENT" not in keyword_tokens.values()


def test_token_kinds_are_distinct_tags() -> None:
    assert "ERROR" in TOKEN_KINDS
    assert "EOF" in TOKEN_KINDS
    assert len(TOKEN_KINDS) == 33


def test_equal_equal_is_one_token() -> None:
    assert kinds("==") == ["EQUAL_EQUAL", "EOF"]
    assert kinds("= =") == ["EQUAL", "EQUAL", "EOF"]


def test_bang_equal_is_one_token() -> None:
    assert kinds("!=") == ["BANG_EQUAL", "EOF"]
    assert kinds("!x") == ["BANG", "IDENT", "EOF"]


def test_comparison_operators() -> None:
    assert kinds("a < b <= c > d >= e") == [
        "IDENT",
        "LESS",
        "IDENT",
        "LESS_EQUAL",
        "IDENT",
        "GREATER",
        "IDENT",
        "GREATER_EQUAL",
        "IDENT",
        "EOF",
    ]


def test_identifier_token() -> None:
    tok = scan("feature_branch2")[0]
    assert tok == Token("IDENT", "feature_branch2")


def test_keyword_prefix_is_identifier() -> None:
    assert kinds("iffy variable repos") == ["IDENT", "IDENT", "IDENT", "EOF"]


def test_keywords_are_case_sensitive() -> None:
    assert kinds("IF Var") == ["IDENT", "IDENT", "EOF"]


def test_leading_underscore_identifier() -> None:
    assert scan("_tmp")[0].kind == "IDENT"


def test_integer_number() -> None:
    tok = scan("42")[0]
    assert tok.kind == "NUMBER"
    assert tok.lexeme == "42"
    assert tok.literal == 42.0
    assert isinstance(tok.literal, float)


def test_decimal_number() -> None:
    tok = scan("3.14")[0]
    assert tok.lexeme == "3.14"
    assert tok.literal == 3.14


def test_trailing_dot_is_not_part_of_number() -> None:
    tokens = scan("3.")
    assert tokens[0] == Token("NUMBER", "3", 3.0)
    assert tokens[1].kind == "ERROR"
    assert tokens[1].lexeme == "."
    assert tokens[1].message == "unexpected character '.'"
    assert tokens[2].kind == "EOF"


def test_number_followed_by_identifier() -> None:
    assert kinds("12abc") == ["NUMBER", "IDENT", "EOF"]


def test_string_token() -> None:
    tok = scan('"main branch"')[0]
    assert tok.kind == "STRING"
    assert tok.lexeme == '"main branch"'
    assert tok.literal == "main branch"


def test_empty_string_token() -> None:
    tok = scan('""')[0]
    assert tok.literal == ""


def test_escape_sequences_are_not_processed() -> None:
    tok = scan('"line\\nbreak"')[0]
    assert tok.literal == "line\\nbreak"


def test_multiline_string_counts_lines() -> None:
    tokens = scan('"a\nb" x')
    assert tokens[0].literal == "a\nb"
    assert tokens[0].line == 2
    assert tokens[1].line == 2


def test_unterminated_string() -> None:
    tokens = scan('"abc')
    assert len(tokens) == 2
    assert tokens[0].kind == "ERROR"
    assert tokens[0].message == "unterminated string"
    assert tokens[0].line == 1
    assert tokens[1].kind == "EOF"


def test_unterminated_string_reports_line_where_scanning_stopped() -> None:
    tokens = scan('x\n"abc\ndef')
    assert tokens[1].kind == "ERROR"
    assert tokens[1].line == 3


def test_unexpected_character_returns_error_and_resumes() -> None:
    tokens = scan("a ~ b")
    assert [t.kind for t in tokens] == ["IDENT", "ERROR", "IDENT", "EOF"]
    assert tokens[1].lexeme == "~"
    assert tokens[1].message == "unexpected character '~'"


def test_line_tracking() -> None:
    tokens = scan("a\nb\nc")
    assert [t.line for t in tokens[:3]] == [1, 2, 3]


def test_whitespace_is_skipped() -> None:
    assert kinds(" \t\r\n  var\t") == ["VAR", "EOF"]


def test_empty_input_returns_only_eof() -> None:
    assert scan("") == [Token("EOF", "", line=1)]


def test_eof_carries_last_line() -> None:
    assert scan("a\n\n")[-1] == Token("EOF", "", line=3)


def test_lexer_keeps_returning_eof() -> None:
    lexer = Lexer(CharacterStream("x"))
    assert lexer.next_token().kind == "IDENT"
    assert lexer.next_token().kind == "EOF"
    assert lexer.next_token().kind == "EOF"


def test_character_stream_methods() -> None:
    stream = CharacterStream("a\nb")
    assert stream.peek() == "a"
    assert stream.peek(2) == "b"
    assert stream.next() == "a"
    assert stream.next() == "\n"
    assert stream.line == 2
    assert not stream.end_of_file()
    stream.next()
    assert stream.end_of_file()
    assert stream.peek() == ""


def test_character_stream_next_past_eof_raises() -> None:
    stream = CharacterStream("")
    with pytest.raises(EOFError, match="Attempted to read past end of source"):
        stream.next()


def test_token_repr_and_eq() -> None:
    t1 = Token("NUMBER", "42", 42.0, 1)
    t2 = Token("NUMBER", "42", 42.0, 1)
    t3 = Token("IDENT", "x")

    assert repr(t1) == "Token(NUMBER, '42', 42.0, line=1)"
    assert repr(t3) == "Token(IDENT, 'x', line=1)"
    assert t1 == t2
    assert t1 != t3
    assert len({t1, t2, t3}) == 2


def test_token_is_immutable() -> None:
    tok = Token("IDENT", "x")
    with pytest.raises(AttributeError):
        tok.lexeme = "y"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        del tok.line


def test_error_token_repr_shows_message() -> None:
    tok = scan("@")[0]
    assert repr(tok) == "Token(ERROR, \"unexpected character '@'\", line=1)"


@given(st.text(max_size=100))  # type: ignore[misc]
def test_scan_never_raises_and_ends_with_one_eof(text: str) -> None:
    tokens = scan(text)
    assert tokens[-1].kind == "EOF"
    assert [t.kind for t in tokens].count("EOF") == 1


@given(st.text(max_size=60))  # type: ignore[misc]
def test_scan_is_deterministic(text: str) -> None:
    assert scan(text) == scan(text)


@given(st.from_regex(r"[A-Za-z_][A-Za-z0-9_]{0,12}", fullmatch=True))  # type: ignore[misc]
def test_word_scans_to_one_token(word: str) -> None:
    tokens = scan(word)
    assert len(tokens) == 2
    assert tokens[0].lexeme == word
    if word not in keyword_tokens and word not in literal_keywords:
        assert tokens[0].kind == "IDENT"


@given(st.integers(min_value=0, max_value=10**9), st.integers(min_value=0, max_value=999))  # type: ignore[misc]
def test_number_literal_decoding(whole: int, frac: int) -> None:
    text = f"{whole}.{frac}"
    tok = scan(text)[0]
    assert tok.lexeme == text
    assert tok.literal == float(text)
