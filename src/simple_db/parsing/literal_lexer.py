"""Lexer for schema and row literals."""

import ply.lex as lex

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


def unescape(body: str) -> str:
    """Resolve backslash escapes in a quoted literal body."""
    out = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            out.append(_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


class LiteralLexer:
    """Lexer for tokenizing value and type-name literals."""

    tokens = [
        "IDENTIFIER",
        "INTEGER",
        "REAL",
        "IMAG",
        "CHAR",
        "STRING",
        "PLUS",
        "MINUS",
        "LPAREN",
        "RPAREN",
        "COMMA",
    ]

    t_PLUS = r"\+"
    t_MINUS = r"-"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_COMMA = r","

    t_ignore = " \t\n"

    def __init__(self) -> None:
        self.lexer: lex.LexToken = None  # type: ignore

    # Function tokens are tried in definition order: IMAG before REAL before INTEGER
    def t_IMAG(self, t: lex.LexToken) -> lex.LexToken:
        r"(?:\d+\.\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|\d+[eE][+-]?\d+|\d+)i(?![A-Za-z0-9_])"
        text = t.value[:-1]
        if text.isdigit():
            t.value = (int(text), True)
        else:
            t.value = (float(text), False)
        return t

    def t_REAL(self, t: lex.LexToken) -> lex.LexToken:
        r"(?:\d+\.\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|\d+[eE][+-]?\d+)"
        t.value = float(t.value)
        return t

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"\d+"
        t.value = int(t.value)
        return t

    def t_CHAR(self, t: lex.LexToken) -> lex.LexToken:
        r"'(?:[^'\\]|\\.)*'"
        value = unescape(t.value[1:-1])
        if len(value) != 1:
            raise SyntaxError(f"Character literal must hold one character at position {t.lexpos}")
        t.value = value
        return t

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"(?:[^"\\]|\\.)*"'
        t.value = unescape(t.value[1:-1])
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
