"""
Monkey Lexer
============
Tokenizes Monkey source code into a stream of typed tokens.
Handles operators, delimiters, keywords, string/integer literals and
identifiers. Nothing is fatal here: characters that cannot start a token
and integer literals outside the 64-bit range come out as ILLEGAL tokens
and are reported later by the parser.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
_INT64_DIGITS = len(str(INT64_MAX))


class TokenType(Enum):
    """All token types in the Monkey language."""
    ILLEGAL     = auto()
    EOF         = auto()

    # Identifiers and literals
    IDENT       = auto()   # add, foobar, x
    INT         = auto()   # 1343456
    STRING      = auto()   # "..."

    # Operators
    ASSIGN      = auto()   # =
    PLUS        = auto()   # +
    MINUS       = auto()   # -
    BANG        = auto()   # !
    ASTERISK    = auto()   # *
    SLASH       = auto()   # /
    LT          = auto()   # <
    GT          = auto()   # >
    EQ          = auto()   # ==
    NOT_EQ      = auto()   # !=

    # Delimiters
    COMMA       = auto()   # ,
    SEMICOLON   = auto()   # ;
    COLON       = auto()   # :
    LPAREN      = auto()   # (
    RPAREN      = auto()   # )
    LBRACE      = auto()   # {
    RBRACE      = auto()   # }
    LBRACKET    = auto()   # [
    RBRACKET    = auto()   # ]

    # Keywords
    FUNCTION    = auto()   # fn
    LET         = auto()   # let
    TRUE        = auto()   # true
    FALSE       = auto()   # false
    IF          = auto()   # if
    ELSE        = auto()   # else
    RETURN      = auto()   # return

    @property
    def label(self) -> str:
        """Human-readable spelling used in error messages."""
        return SPELLINGS.get(self, self.name)


SINGLE_CHAR_TOKENS = {
    "=": TokenType.ASSIGN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "!": TokenType.BANG,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "<": TokenType.LT,
    ">": TokenType.GT,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
}

KEYWORDS = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
}

SPELLINGS = {
    **{tt: ch for ch, tt in SINGLE_CHAR_TOKENS.items()},
    **{tt: word for word, tt in KEYWORDS.items()},
    TokenType.EQ: "==",
    TokenType.NOT_EQ: "!=",
}

# Token types whose text is data rather than a fixed spelling
PAYLOAD_TYPES = (TokenType.IDENT, TokenType.INT, TokenType.STRING, TokenType.ILLEGAL)

ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"'}


@dataclass(frozen=True)
class Token:
    """A single token from the Monkey source."""
    type: TokenType
    value: str
    line: int
    col: int

    def describe(self) -> str:
        """Render the token for diagnostics: IDENT(foo), INT(5), ), EOF ..."""
        if self.type == TokenType.STRING:
            return f'STRING("{self.value}")'
        if self.type in PAYLOAD_TYPES:
            return f"{self.type.name}({self.value})"
        return self.type.label

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.col})"


def lookup_ident(word: str) -> TokenType:
    """Resolve a scanned word against the keyword table."""
    return KEYWORDS.get(word, TokenType.IDENT)


def _is_letter(ch: str | None) -> bool:
    return ch is not None and (("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_")


def _is_digit(ch: str | None) -> bool:
    return ch is not None and "0" <= ch <= "9"


class Lexer:
    """
    Tokenizes Monkey source code.

    Usage:
        lexer = Lexer(source_code)
        token = lexer.next_token()     # one at a time, EOF forever at the end
        tokens = Lexer(source_code).tokenize()
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1

    def _current(self) -> str | None:
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> str | None:
        idx = self.pos + offset
        if idx >= len(self.source):
            return None
        return self.source[idx]

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _skip_whitespace(self):
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self._advance()

    def _read_string(self) -> Token:
        """Read a double-quoted string literal."""
        start_line, start_col = self.line, self.col
        raw = [self._advance()]  # consume opening "
        chars = []
        while self.pos < len(self.source):
            ch = self._advance()
            raw.append(ch)
            if ch == '"':
                return Token(TokenType.STRING, "".join(chars), start_line, start_col)
            if ch == "\\" and self.pos < len(self.source):
                next_ch = self._advance()
                raw.append(next_ch)
                chars.append(ESCAPES.get(next_ch, next_ch))
            else:
                chars.append(ch)
        # Unterminated: hand the parser what we saw
        return Token(TokenType.ILLEGAL, "".join(raw), start_line, start_col)

    def _read_number(self) -> Token:
        """Read an integer literal; out-of-range values become ILLEGAL."""
        start_line, start_col = self.line, self.col
        chars = []
        while _is_digit(self._current()):
            chars.append(self._advance())
        text = "".join(chars)
        digits = text.lstrip("0") or "0"
        # int() refuses digit strings past the host's conversion limit
        if len(digits) > _INT64_DIGITS or int(digits) > INT64_MAX:
            return Token(TokenType.ILLEGAL, text, start_line, start_col)
        return Token(TokenType.INT, digits, start_line, start_col)

    def _read_identifier(self) -> Token:
        """Read an identifier or keyword."""
        start_line, start_col = self.line, self.col
        chars = []
        while _is_letter(self._current()):
            chars.append(self._advance())
        word = "".join(chars)
        return Token(lookup_ident(word), word, start_line, start_col)

    def next_token(self) -> Token:
        """Scan and return the next token."""
        self._skip_whitespace()

        ch = self._current()
        if ch is None:
            return Token(TokenType.EOF, "", self.line, self.col)

        line, col = self.line, self.col

        # Two-character operators
        if ch == "=" and self._peek() == "=":
            self._advance()
            self._advance()
            return Token(TokenType.EQ, "==", line, col)

        if ch == "!" and self._peek() == "=":
            self._advance()
            self._advance()
            return Token(TokenType.NOT_EQ, "!=", line, col)

        if ch in SINGLE_CHAR_TOKENS:
            self._advance()
            return Token(SINGLE_CHAR_TOKENS[ch], ch, line, col)

        if ch == '"':
            return self._read_string()

        if _is_letter(ch):
            return self._read_identifier()

        if _is_digit(ch):
            return self._read_number()

        self._advance()
        return Token(TokenType.ILLEGAL, ch, line, col)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source into a list of tokens ending in EOF."""
        return list(self._iter_tokens())

    def _iter_tokens(self) -> Iterator[Token]:
        """Generate tokens one at a time, EOF included."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return
