"""Parsers for schema lists and row literals.

Schema list::

    int, text, complex_real

Row literal::

    42, -1.5e3, 'c', "text\\n", 3+4i, (1.5 - 2i), -2i, nan
"""

from __future__ import annotations

from typing import Any

import ply.yacc as yacc

from simple_db.parsing.literal_lexer import LiteralLexer
from simple_db.row import Row
from simple_db.types import TypeTag, Value

_SPECIAL_REALS = {"inf": float("inf"), "nan": float("nan")}


class RowParser:
    """Parser turning a comma-separated value list into a Row."""

    tokens = LiteralLexer.tokens
    start = "row"

    def __init__(self) -> None:
        self.lexer = LiteralLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_row(self, p: yacc.YaccProduction) -> None:
        """row : value_list
               | value_list COMMA"""
        p[0] = p[1]

    def p_value_list_single(self, p: yacc.YaccProduction) -> None:
        """value_list : value"""
        p[0] = [p[1]]

    def p_value_list_multiple(self, p: yacc.YaccProduction) -> None:
        """value_list : value_list COMMA value"""
        p[0] = p[1] + [p[3]]

    def p_value_number(self, p: yacc.YaccProduction) -> None:
        """value : signed_number"""
        number, is_int = p[1]
        p[0] = Value.integer(number) if is_int else Value.real(number)

    def p_value_complex(self, p: yacc.YaccProduction) -> None:
        """value : complex
                 | LPAREN complex RPAREN"""
        p[0] = p[1] if len(p) == 2 else p[2]

    def p_value_char(self, p: yacc.YaccProduction) -> None:
        """value : CHAR"""
        p[0] = Value.char(p[1])

    def p_value_string(self, p: yacc.YaccProduction) -> None:
        """value : STRING"""
        p[0] = Value.text(p[1])

    def p_complex_full(self, p: yacc.YaccProduction) -> None:
        """complex : signed_number PLUS IMAG
                   | signed_number MINUS IMAG"""
        imag, imag_is_int = p[3]
        if p[2] == "-":
            imag = -imag
        p[0] = _complex(p[1], (imag, imag_is_int))

    def p_complex_imaginary(self, p: yacc.YaccProduction) -> None:
        """complex : IMAG
                   | MINUS IMAG
                   | PLUS IMAG"""
        imag, imag_is_int = p[len(p) - 1]
        if p[1] == "-":
            imag = -imag
        p[0] = _complex((0, True), (imag, imag_is_int))

    def p_signed_number(self, p: yacc.YaccProduction) -> None:
        """signed_number : number
                         | MINUS number
                         | PLUS number"""
        number, is_int = p[len(p) - 1]
        if p[1] == "-":
            number = -number
        p[0] = (number, is_int)

    def p_number_integer(self, p: yacc.YaccProduction) -> None:
        """number : INTEGER"""
        p[0] = (p[1], True)

    def p_number_real(self, p: yacc.YaccProduction) -> None:
        """number : REAL"""
        p[0] = (p[1], False)

    def p_number_special(self, p: yacc.YaccProduction) -> None:
        """number : IDENTIFIER"""
        special = _SPECIAL_REALS.get(p[1].lower())
        if special is None:
            raise SyntaxError(f"Unexpected name '{p[1]}' (position {p.lexpos(1)})")
        p[0] = (special, False)

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> Row:
        """Parse a row literal. Blank input is the empty row."""
        if not data.strip():
            return Row()
        if self.parser is None:
            self.build(debug=False, write_tables=False, errorlog=yacc.NullLogger())
        values = self.parser.parse(data, lexer=self.lexer.lexer)
        return Row(values)


class SchemaParser:
    """Parser turning a comma-separated list of type names into tags."""

    tokens = LiteralLexer.tokens
    start = "schema"

    def __init__(self) -> None:
        self.lexer = LiteralLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_schema(self, p: yacc.YaccProduction) -> None:
        """schema : type_list
                  | type_list COMMA"""
        p[0] = p[1]

    def p_type_list_single(self, p: yacc.YaccProduction) -> None:
        """type_list : type_name"""
        p[0] = [p[1]]

    def p_type_list_multiple(self, p: yacc.YaccProduction) -> None:
        """type_list : type_list COMMA type_name"""
        p[0] = p[1] + [p[3]]

    def p_type_name(self, p: yacc.YaccProduction) -> None:
        """type_name : IDENTIFIER"""
        try:
            p[0] = TypeTag.from_name(p[1])
        except ValueError:
            raise SyntaxError(f"Unknown type '{p[1]}' (position {p.lexpos(1)})") from None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> list[TypeTag]:
        """Parse a schema list. Blank input is the empty schema."""
        if not data.strip():
            return []
        if self.parser is None:
            self.build(debug=False, write_tables=False, errorlog=yacc.NullLogger())
        return self.parser.parse(data, lexer=self.lexer.lexer)


def parse_row(data: str) -> Row:
    """Parse a row literal with a fresh parser."""
    return RowParser().parse(data)


def parse_schema(data: str) -> list[TypeTag]:
    """Parse a schema list with a fresh parser."""
    return SchemaParser().parse(data)


def _complex(real: tuple[Any, bool], imag: tuple[Any, bool]) -> Value:
    """Build a complex value; integer only when both parts are integer literals."""
    if real[1] and imag[1]:
        return Value.complex_integer(real[0], imag[0])
    return Value.complex_real(float(real[0]), float(imag[0]))
