import pytest
from hypothesis import given
from hypothesis import strategies as st

from nibbl.nibbl_constants import TokenType
from nibbl.nibbl_lexer import CharacterStream, Lexer, Token, token_hashmap


def tokenize(source: str) -> list[Token]:
    lexer = Lexer(CharacterStream(source))
    tokens = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type == TokenType.EOF:
            break
    return tokens


def types_of(source: str) -> list[TokenType]:
    return [tok.type for tok in tokenize(source)]


def test_single_char_tokens() -> None:
    code = "= + - ! * / < > , ; ( ) { }"
    expected = [
        TokenType.ASSIGN,
        TokenType.PLUS,
        TokenType.MINUS,
        TokenType.BANG,
        TokenType.ASTERISK,
        TokenType.SLASH,
        TokenType.LT,
        TokenType.GT,
        TokenType.COMMA,
        TokenType.SEMICOLON,
        TokenType.LPAREN,
        TokenType.RPAREN,
        TokenType.LBRACE,
        TokenType.RBRACE,
        TokenType.EOF,
    ]
    assert types_of(code) == expected


def test_two_char_operators_win_over_prefix() -> None:
    tokens = tokenize("10 == 10; 10 != 9; a = !b")
    pairs = [(t.type, t.literal) for t in tokens]
    assert pairs == [
        (TokenType.INT, "10"),
        (TokenType.EQ, "=="),
        (TokenType.INT, "10"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.INT, "10"),
        (TokenType.NOT_EQ, "!="),
        (TokenType.INT, "9"),
        (TokenType.SEMICOLON, ";"),
        (TokenType.IDENT, "a"),
        (TokenType.ASSIGN, "="),
        (TokenType.BANG, "!"),
        (TokenType.IDENT, "b"),
        (TokenType.EOF, ""),
    ]


def test_adjacent_operators_without_spaces() -> None:
    assert types_of("!-/*5;") == [
        TokenType.BANG,
        TokenType.MINUS,
        TokenType.SLASH,
        TokenType.ASTERISK,
        TokenType.INT,
        TokenType.SEMICOLON,
        TokenType.EOF,
    ]


def test_full_program_token_stream() -> None:
    source = """let five = 5;
let add = fn(x, y) {
  x + y;
};
let result = add(five, 10);
if (5 < 10) { return true; } else { return false; }
"""
    tokens = tokenize(source)
    assert [t.literal for t in tokens[:10]] == [
        "let",
        "five",
        "=",
        "5",
        ";",
        "let",
        "add",
        "=",
        "fn",
        "(",
    ]
    assert tokens[-1].type == TokenType.EOF
    assert TokenType.ILLEGAL not in {t.type for t in tokens}
    assert [t.type for t in tokens if t.literal in ("if", "else", "return", "true", "false")] == [
        TokenType.IF,
        TokenType.RETURN,
        TokenType.TRUE,
        TokenType.ELSE,
        TokenType.RETURN,
        TokenType.FALSE,
    ]


@pytest.mark.parametrize(
    "word,expected",
    [
        ("fn", TokenType.FUNCTION),
        ("let", TokenType.LET),
        ("true", TokenType.TRUE),
        ("false", TokenType.FALSE),
        ("if", TokenType.IF),
        ("else", TokenType.ELSE),
        ("return", TokenType.RETURN),
    ],
)  # type: ignore[misc]
def test_keywords(word: str, expected: TokenType) -> None:
    tok = Lexer(CharacterStream(word)).next_token()
    assert tok.type == expected
    assert tok.literal == word


def test_keyword_match_is_exact() -> None:
    tokens = tokenize("lets Let returned fn_ _let")
    assert [t.type for t in tokens[:-1]] == [TokenType.IDENT] * 5
    assert [t.literal for t in tokens[:-1]] == ["lets", "Let", "returned", "fn_", "_let"]


def test_identifier_with_digits_and_underscores() -> None:
    tok = Lexer(CharacterStream("foo_bar2 ")).next_token()
    assert tok.type == TokenType.IDENT
    assert tok.literal == "foo_bar2"


def test_integer_token() -> None:
    tok = Lexer(CharacterStream("12345")).next_token()
    assert tok.type == TokenType.INT
    assert tok.literal == "12345"


def test_integer_then_identifier() -> None:
    tokens = tokenize("5abc")
    assert [(t.type, t.literal) for t in tokens[:2]] == [
        (TokenType.INT, "5"),
        (TokenType.IDENT, "abc"),
    ]


def test_sign_is_not_part_of_integer() -> None:
    assert types_of("-5") == [TokenType.MINUS, TokenType.INT, TokenType.EOF]


def test_dot_is_illegal() -> None:
    tokens = tokenize("1.5")
    assert [(t.type, t.literal) for t in tokens] == [
        (TokenType.INT, "1"),
        (TokenType.ILLEGAL, "."),
        (TokenType.INT, "5"),
        (TokenType.EOF, ""),
    ]


@pytest.mark.parametrize("char", ["@", "#", "$", "~", "`", "é", "\u00a0"])  # type: ignore[misc]
def test_unrecognized_character_returns_illegal(char: str) -> None:
    token = Lexer(CharacterStream(char)).next_token()
    assert token.type == TokenType.ILLEGAL
    assert token.literal == char


def test_whitespace_is_skipped() -> None:
    tokens = tokenize(" \t\r\n  x \n\t")
    assert [(t.type, t.literal) for t in tokens] == [
        (TokenType.IDENT, "x"),
        (TokenType.EOF, ""),
    ]


def test_line_and_column_tracking() -> None:
    tokens = tokenize("let x = 1;\n  y")
    assert (tokens[0].line, tokens[0].col) == (1, 1)
    assert (tokens[1].line, tokens[1].col) == (1, 5)
    y = tokens[5]
    assert y.literal == "y"
    assert (y.line, y.col) == (2, 3)


def test_eof_is_idempotent() -> None:
    lexer = Lexer(CharacterStream("x"))
    assert lexer.next_token().type == TokenType.IDENT
    eofs = [lexer.next_token() for _ in range(3)]
    assert all(tok.type == TokenType.EOF for tok in eofs)
    assert eofs[0] == eofs[1] == eofs[2]


def test_empty_input_returns_eof() -> None:
    token = Lexer(CharacterStream("")).next_token()
    assert token.type == TokenType.EOF
    assert token.literal == ""


def test_token_repr_and_eq() -> None:
    t1 = Token(TokenType.INT, "42", 1, 2)
    t2 = Token(TokenType.INT, "42", 1, 2)
    t3 = Token(TokenType.IDENT, "x")

    assert repr(t1) == "Token(INT, '42')"
    assert t1 == t2
    assert t1 != t3
    assert t1 != "42"

    token_set = {t1, t2, t3}
    assert len(token_set) == 2


def test_token_is_immutable() -> None:
    tok = Token(TokenType.IDENT, "x", 1, 1)
    with pytest.raises(AttributeError):
        tok.literal = "y"  # type: ignore[misc]
    assert tok.literal == "x"


def test_character_stream_methods() -> None:
    stream = CharacterStream("abc")
    assert stream.peek() == "a"
    assert stream.next() == "a"
    assert stream.current() == "b"
    assert stream.peek(1) == "c"
    assert not stream.end_of_file()
    stream.next()
    stream.next()
    assert stream.end_of_file()
    assert stream.current() is None
    assert stream.peek() == ""
    assert stream.peek(-1) == "c"


def test_lexer_peek_tracks_stream_position() -> None:
    lexer = Lexer(CharacterStream("ab"))
    assert lexer.peek() == "a"
    lexer.advance()
    assert lexer.peek() == "b"
    lexer.advance()
    assert lexer.peek() == ""


def test_character_stream_next_past_eof_raises() -> None:
    stream = CharacterStream("")
    with pytest.raises(EOFError, match="Attempted to read past end of source"):
        stream.next()


def test_every_hashmap_entry_lexes_to_itself() -> None:
    for literal, token_type in token_hashmap.items():
        tokens = tokenize(literal)
        assert tokens[0] == Token(token_type, literal, 1, 1)
        assert tokens[1].type == TokenType.EOF


@given(st.text(max_size=100))  # type: ignore[misc]
def test_lexer_does_not_crash_on_random_input(text: str) -> None:
    tokens = tokenize(text)
    assert tokens[-1].type == TokenType.EOF
    assert all(tok.type != TokenType.EOF for tok in tokens[:-1])


@given(st.text(alphabet="abcxyz019_=!+-*/<>,;(){} \n", max_size=60))  # type: ignore[misc]
def test_literals_cover_source_without_whitespace(text: str) -> None:
    tokens = tokenize(text)
    assert "".join(t.literal for t in tokens) == "".join(text.split())
