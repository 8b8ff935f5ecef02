"""Tokenizer for TypeScript declaration sources.

Only as much of the language as the declaration parser needs is understood.
Expressions (initializers, function bodies) are tokenized so that they can be
skipped reliably, but their tokens are never interpreted beyond bracket
matching.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import List, Optional, Union

from ._errors import TypeScriptSyntaxError


class TokenType(Enum):
    # Literals
    IDENTIFIER = auto()
    PRIVATE_NAME = auto()  # #name
    STRING_LITERAL = auto()
    NUMBER_LITERAL = auto()
    TEMPLATE_LITERAL = auto()
    REGEX_LITERAL = auto()

    # Operators and punctuation
    PIPE = auto()  # |
    AMPERSAND = auto()  # &
    QUESTION = auto()  # ?
    COLON = auto()  # :
    SEMICOLON = auto()  # ;
    COMMA = auto()  # ,
    DOT = auto()  # .
    ELLIPSIS = auto()  # ...
    ARROW = auto()  # =>
    EQUALS = auto()  # =
    AT = auto()  # @
    MINUS = auto()  # -
    PLUS = auto()  # +
    LESS_THAN = auto()  # <
    GREATER_THAN = auto()  # >, never combined so `A<B<C>>` closes twice.
    OPERATOR = auto()  # Anything else, eg `===` or `!`.

    # Brackets and parentheses
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    LBRACE = auto()  # {
    RBRACE = auto()  # }

    # Special
    EOF = auto()


@dataclass
class Token:
    type: TokenType
    value: str
    position: int
    end: int
    line: int
    column: int
    newline_before: bool = False
    """Whether a line break separates this token from the previous one. Used
    for automatic semicolon insertion."""

    def is_identifier(self, *names: str) -> bool:
        return self.type == TokenType.IDENTIFIER and (
            len(names) == 0 or self.value in names
        )


_SINGLE_CHAR_TOKENS = {
    "|": TokenType.PIPE,
    "&": TokenType.AMPERSAND,
    "?": TokenType.QUESTION,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "=": TokenType.EQUALS,
    "@": TokenType.AT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

_MULTI_CHAR_OPERATORS = (
    "===",
    "!==",
    "**=",
    "&&=",
    "||=",
    "??=",
    "==",
    "!=",
    "&&",
    "||",
    "??",
    "?.",
    "++",
    "--",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
    "**",
)

# Keywords after which a `/` starts a regular expression rather than a division.
_REGEX_PREFIX_KEYWORDS = frozenset(
    {
        "return",
        "typeof",
        "instanceof",
        "in",
        "of",
        "new",
        "delete",
        "void",
        "throw",
        "case",
        "do",
        "else",
        "yield",
        "await",
    }
)


def _is_identifier_start(char: str) -> bool:
    return char.isalpha() or char in "_$"


def _is_identifier_part(char: str) -> bool:
    return char.isalnum() or char in "_$"


class Lexer:
    """Tokenizes TypeScript source text."""

    def __init__(self, text: str, path: Union[str, Path] = "<string>"):
        self.text = text
        self.path = path
        self.position = 0
        self.line = 1
        self.line_start = 0
        self.current_char = self.text[0] if text else None
        self.previous: Optional[Token] = None

    def advance(self):
        """Move to the next character."""
        if self.current_char == "\n":
            self.line += 1
            self.line_start = self.position + 1
        self.position += 1
        if self.position >= len(self.text):
            self.current_char = None
        else:
            self.current_char = self.text[self.position]

    def peek(self, offset: int = 1) -> Optional[str]:
        """Look ahead at the next character without advancing."""
        peek_pos = self.position + offset
        if peek_pos >= len(self.text):
            return None
        return self.text[peek_pos]

    def error(self, message: str) -> TypeScriptSyntaxError:
        return TypeScriptSyntaxError(
            message, self.path, self.line, self.position - self.line_start + 1
        )

    def skip_trivia(self) -> bool:
        """Skip whitespace and comments. Returns True if a line break was seen."""
        newline = False
        if self.position == 0 and self.text.startswith("#!"):
            while self.current_char is not None and self.current_char != "\n":
                self.advance()
        while self.current_char is not None:
            if self.current_char.isspace():
                newline = newline or self.current_char in "\n\r\u2028\u2029"
                self.advance()
            elif self.current_char == "/" and self.peek() == "/":
                while self.current_char is not None and self.current_char != "\n":
                    self.advance()
            elif self.current_char == "/" and self.peek() == "*":
                self.advance()
                self.advance()
                while not (self.current_char == "*" and self.peek() == "/"):
                    if self.current_char is None:
                        raise self.error("Unterminated comment")
                    newline = newline or self.current_char == "\n"
                    self.advance()
                self.advance()
                self.advance()
            else:
                break
        return newline

    def read_string_literal(self) -> str:
        """Read a quoted string literal, including its quotes."""
        quote_char = self.current_char
        start = self.position
        self.advance()

        while self.current_char != quote_char:
            if self.current_char is None or self.current_char == "\n":
                raise self.error("Unterminated string literal")
            if self.current_char == "\\":
                self.advance()
            self.advance()

        self.advance()
        return self.text[start : self.position]

    def read_template_literal(self) -> str:
        """Read a template literal, including any nested `${...}` expressions."""
        start = self.position
        self.advance()  # consume `

        while self.current_char != "`":
            if self.current_char is None:
                raise self.error("Unterminated template literal")
            if self.current_char == "\\":
                self.advance()
                self.advance()
            elif self.current_char == "$" and self.peek() == "{":
                self.advance()
                self.advance()
                self.skip_template_expression()
            else:
                self.advance()

        self.advance()
        return self.text[start : self.position]

    def skip_template_expression(self):
        depth = 1
        while depth > 0:
            if self.current_char is None:
                raise self.error("Unterminated template literal")
            if self.current_char in "\"'":
                self.read_string_literal()
            elif self.current_char == "`":
                self.read_template_literal()
            elif self.current_char == "/" and self.peek() in ("/", "*"):
                self.skip_trivia()
            else:
                if self.current_char == "{":
                    depth += 1
                elif self.current_char == "}":
                    depth -= 1
                self.advance()

    def read_number_literal(self) -> str:
        """Read a number literal: decimal, hex/octal/binary, exponents,
        separators, and bigint suffixes."""
        start = self.position
        is_hex = self.text[start : start + 2].lower() == "0x"
        while self.current_char is not None:
            if self.current_char in "eE" and not is_hex:
                self.advance()
                if self.current_char in ("+", "-"):
                    self.advance()
            elif self.current_char.isalnum() or self.current_char in "._":
                if self.current_char == "." and self.peek() == ".":
                    break
                self.advance()
            else:
                break
        return self.text[start : self.position]

    def read_regex_literal(self) -> str:
        start = self.position
        self.advance()  # consume /
        in_class = False
        while True:
            if self.current_char is None or self.current_char == "\n":
                raise self.error("Unterminated regular expression literal")
            if self.current_char == "\\":
                self.advance()
            elif self.current_char == "[":
                in_class = True
            elif self.current_char == "]":
                in_class = False
            elif self.current_char == "/" and not in_class:
                self.advance()
                break
            self.advance()
        while self.current_char is not None and _is_identifier_part(self.current_char):
            self.advance()
        return self.text[start : self.position]

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        start = self.position
        while self.current_char is not None and _is_identifier_part(self.current_char):
            self.advance()
        return self.text[start : self.position]

    def regex_allowed(self) -> bool:
        """Whether a `/` at the current position starts a regular expression."""
        previous = self.previous
        if previous is None:
            return True
        if previous.type == TokenType.IDENTIFIER:
            return previous.value in _REGEX_PREFIX_KEYWORDS
        return previous.type not in (
            TokenType.NUMBER_LITERAL,
            TokenType.STRING_LITERAL,
            TokenType.TEMPLATE_LITERAL,
            TokenType.REGEX_LITERAL,
            TokenType.PRIVATE_NAME,
            TokenType.RPAREN,
            TokenType.RBRACKET,
            TokenType.RBRACE,
        )

    def get_next_token(self) -> Token:
        """Get the next token from the input."""
        newline_before = self.skip_trivia()
        pos = self.position
        line = self.line
        column = pos - self.line_start + 1

        def make(token_type: TokenType, value: str) -> Token:
            return Token(
                token_type, value, pos, self.position, line, column, newline_before
            )

        char = self.current_char
        if char is None:
            return make(TokenType.EOF, "")

        # String and template literals
        if char in "\"'":
            return make(TokenType.STRING_LITERAL, self.read_string_literal())
        if char == "`":
            return make(TokenType.TEMPLATE_LITERAL, self.read_template_literal())

        # Number literals
        if char.isdigit() or (char == "." and (self.peek() or "").isdigit()):
            return make(TokenType.NUMBER_LITERAL, self.read_number_literal())

        # Identifiers and keywords
        if _is_identifier_start(char):
            return make(TokenType.IDENTIFIER, self.read_identifier())
        if char == "#" and _is_identifier_start(self.peek() or ""):
            self.advance()
            return make(TokenType.PRIVATE_NAME, "#" + self.read_identifier())

        # Regular expressions
        if char == "/" and self.regex_allowed():
            return make(TokenType.REGEX_LITERAL, self.read_regex_literal())

        # Arrow function => and spread ...
        if char == "=" and self.peek() == ">":
            self.advance()
            self.advance()
            return make(TokenType.ARROW, "=>")
        if char == "." and self.peek() == "." and self.peek(2) == ".":
            for _ in range(3):
                self.advance()
            return make(TokenType.ELLIPSIS, "...")

        for operator in _MULTI_CHAR_OPERATORS:
            if self.text.startswith(operator, self.position):
                # `?.5` is a conditional followed by a number.
                if operator == "?." and (self.peek(2) or "").isdigit():
                    continue
                for _ in range(len(operator)):
                    self.advance()
                return make(TokenType.OPERATOR, operator)

        self.advance()
        if char in _SINGLE_CHAR_TOKENS:
            return make(_SINGLE_CHAR_TOKENS[char], char)
        if char in "*/%^!~":
            return make(TokenType.OPERATOR, char)
        raise TypeScriptSyntaxError(
            f"Unexpected character {char!r}", self.path, line, column
        )

    def tokenize(self) -> List[Token]:
        """Tokenize the entire input string."""
        tokens = []
        while True:
            token = self.get_next_token()
            tokens.append(token)
            self.previous = token
            if token.type == TokenType.EOF:
                break
        return tokens
