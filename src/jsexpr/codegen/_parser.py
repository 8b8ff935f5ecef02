"""Recursive descent parser for TypeScript declarations.

Class, interface, enum, type alias and namespace declarations are parsed into
the nodes in `_ast`. Everything else (imports, functions, variables,
expression statements, method bodies) is skipped by bracket matching, with
automatic semicolon insertion approximated from line breaks.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, FrozenSet, List, Optional, Set, TypeVar, Union

from . import _ast as ast
from ._errors import TypeScriptSyntaxError
from ._tokens import Lexer, Token, TokenType

NodeT = TypeVar("NodeT")

_KEYWORD_TYPES = frozenset(
    {
        "any",
        "unknown",
        "number",
        "string",
        "boolean",
        "void",
        "undefined",
        "null",
        "never",
        "object",
        "symbol",
        "bigint",
        "this",
    }
)

_MEMBER_MODIFIERS = frozenset(
    {
        "public",
        "private",
        "protected",
        "static",
        "readonly",
        "abstract",
        "declare",
        "override",
        "async",
        "accessor",
    }
)

_PARAMETER_MODIFIERS = frozenset(
    {"public", "private", "protected", "readonly", "override"}
)

_STATEMENT_MODIFIERS = frozenset({"export", "declare", "default", "abstract", "async"})

_OPENING = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LBRACE: TokenType.RBRACE,
}
_CLOSING = frozenset(_OPENING.values())

# Tokens that can end an expression. A line break after one of these, followed
# by the start of something new, ends the statement.
_EXPRESSION_ENDS = frozenset(
    {
        TokenType.IDENTIFIER,
        TokenType.PRIVATE_NAME,
        TokenType.STRING_LITERAL,
        TokenType.NUMBER_LITERAL,
        TokenType.TEMPLATE_LITERAL,
        TokenType.REGEX_LITERAL,
        TokenType.RPAREN,
        TokenType.RBRACKET,
        TokenType.RBRACE,
    }
)
_STATEMENT_STARTS = frozenset(
    {
        TokenType.IDENTIFIER,
        TokenType.PRIVATE_NAME,
        TokenType.STRING_LITERAL,
        TokenType.NUMBER_LITERAL,
        TokenType.AT,
    }
)


class TypeScriptParser:
    """Parses the declarations in one TypeScript source file."""

    def __init__(self, tokens: List[Token], text: str, path: Union[str, Path]):
        self.tokens = tokens
        self.text = text
        self.path = Path(path)
        self.position = 0
        self.current_token = self.tokens[0]

    # ==================== Token helpers ====================

    def advance(self) -> Token:
        """Move to the next token. Returns the token that was current."""
        token = self.current_token
        if self.position < len(self.tokens) - 1:
            self.position += 1
            self.current_token = self.tokens[self.position]
        return token

    def peek(self, offset: int = 1) -> Token:
        """Look ahead at a future token."""
        peek_pos = self.position + offset
        if peek_pos < len(self.tokens):
            return self.tokens[peek_pos]
        return self.tokens[-1]

    @property
    def previous_token(self) -> Optional[Token]:
        return self.tokens[self.position - 1] if self.position > 0 else None

    def at(self, token_type: TokenType, value: Optional[str] = None) -> bool:
        return self.current_token.type == token_type and (
            value is None or self.current_token.value == value
        )

    def at_identifier(self, *names: str) -> bool:
        return self.current_token.is_identifier(*names)

    def consume(self, token_type: TokenType, value: Optional[str] = None) -> bool:
        """Advance past the current token if it matches."""
        if self.at(token_type, value):
            self.advance()
            return True
        return False

    def expect(self, token_type: TokenType, value: Optional[str] = None) -> Token:
        if not self.at(token_type, value):
            expected = repr(value) if value is not None else token_type.name.lower()
            raise self.error(f"Expected {expected}")
        return self.advance()

    def expect_identifier(self) -> str:
        return self.expect(TokenType.IDENTIFIER).value

    def error(self, message: str, token: Optional[Token] = None) -> TypeScriptSyntaxError:
        token = token or self.current_token
        found = "end of file" if token.type == TokenType.EOF else repr(token.value)
        return TypeScriptSyntaxError(
            f"{message}, found {found}", self.path, token.line, token.column
        )

    def source_between(self, start: Token, end: Token) -> str:
        return self.text[start.position : end.end]

    def at_statement_end(self) -> bool:
        """Whether the current token ends a member or statement: a semicolon
        or comma, a closing brace, end of file, or a line break."""
        return (
            self.at(TokenType.SEMICOLON)
            or self.at(TokenType.COMMA)
            or self.at(TokenType.RBRACE)
            or self.at(TokenType.EOF)
            or self.current_token.newline_before
        )

    def consume_separator(self):
        if not self.consume(TokenType.SEMICOLON):
            self.consume(TokenType.COMMA)

    def skip_balanced(self):
        """Skip a bracketed group, starting at its opening bracket."""
        assert self.current_token.type in _OPENING
        depth = 0
        while True:
            token = self.advance()
            if token.type in _OPENING:
                depth += 1
            elif token.type in _CLOSING:
                depth -= 1
                if depth == 0:
                    return
            elif token.type == TokenType.EOF:
                raise self.error("Unbalanced brackets", token)

    def skip_expression(self, terminators: FrozenSet[TokenType]):
        """Skip an expression up to (not including) a terminator at depth zero,
        or a line break that ends the statement."""
        first = True
        while not self.at(TokenType.EOF):
            token = self.current_token
            if token.type in terminators or token.type in _CLOSING:
                return
            if not first and self.ends_by_line_break():
                return
            first = False
            if token.type in _OPENING:
                self.skip_balanced()
            else:
                self.advance()

    def ends_by_line_break(self) -> bool:
        previous = self.previous_token
        return (
            self.current_token.newline_before
            and previous is not None
            and previous.type in _EXPRESSION_ENDS
            and self.current_token.type in _STATEMENT_STARTS
        )

    def skip_statement(self):
        """Skip one statement we don't model."""
        while not self.at(TokenType.EOF):
            if self.consume(TokenType.SEMICOLON):
                return
            if self.at(TokenType.RBRACE):
                return
            if self.current_token.type in _OPENING:
                closes_block = self.at(TokenType.LBRACE)
                self.skip_balanced()
                if closes_block and (
                    self.current_token.newline_before or self.at(TokenType.RBRACE)
                ):
                    return
                continue
            self.advance()
            if self.ends_by_line_break():
                return

    def parse_delimited(
        self, close: TokenType, parse_item: Callable[[], NodeT]
    ) -> List[NodeT]:
        """Parse a comma separated list up to and including `close`."""
        items = []
        while not self.at(close):
            items.append(parse_item())
            if not self.consume(TokenType.COMMA):
                break
        self.expect(close)
        return items

    # ==================== Statements ====================

    def parse_source_file(self) -> ast.SourceFile:
        statements = self.parse_statements()
        if not self.at(TokenType.EOF):
            raise self.error("Unexpected closing brace")
        return ast.SourceFile(self.path, statements)

    def parse_statements(self) -> List[ast.Statement]:
        """Parse statements until a closing brace or end of file."""
        statements = []
        while not self.at(TokenType.EOF) and not self.at(TokenType.RBRACE):
            statement = self.parse_statement()
            if statement is not None:
                statements.append(statement)
        return statements

    def parse_block(self) -> List[ast.Statement]:
        self.expect(TokenType.LBRACE)
        statements = self.parse_statements()
        self.expect(TokenType.RBRACE)
        return statements

    def parse_statement(self) -> Optional[ast.Statement]:
        if self.consume(TokenType.SEMICOLON):
            return None
        while self.at(TokenType.AT):
            self.skip_decorator()

        modifiers = self.parse_statement_modifiers()
        token = self.current_token
        next_token = self.peek()
        same_line = not next_token.newline_before

        if token.is_identifier("namespace", "module") and same_line:
            if next_token.type in (TokenType.IDENTIFIER, TokenType.STRING_LITERAL):
                return self.parse_module_declaration(modifiers)
        if token.is_identifier("global") and "declare" in modifiers:
            self.advance()
            return ast.ModuleDeclaration([], self.parse_block(), modifiers)
        if token.is_identifier("class") and next_token.type != TokenType.LBRACE:
            if next_token.is_identifier("extends", "implements"):
                self.skip_statement()
                return None
            return self.parse_class_declaration(modifiers)
        if (
            token.is_identifier("interface")
            and same_line
            and next_token.type == TokenType.IDENTIFIER
        ):
            return self.parse_interface_declaration(modifiers)
        if token.is_identifier("const") and self.peek().is_identifier("enum"):
            self.advance()
            modifiers = modifiers | {"const"}
            token = self.current_token
            next_token = self.peek()
        if token.is_identifier("enum") and next_token.type == TokenType.IDENTIFIER:
            return self.parse_enum_declaration(modifiers)
        if (
            token.is_identifier("type")
            and same_line
            and next_token.type == TokenType.IDENTIFIER
            and self.peek(2).type in (TokenType.EQUALS, TokenType.LESS_THAN)
        ):
            return self.parse_type_alias_declaration(modifiers)
        if token.is_identifier("function"):
            self.skip_function_declaration()
            return None

        self.skip_statement()
        return None

    def parse_statement_modifiers(self) -> FrozenSet[str]:
        modifiers: Set[str] = set()
        while (
            self.current_token.is_identifier(*_STATEMENT_MODIFIERS)
            and self.peek().type == TokenType.IDENTIFIER
            and not self.peek().newline_before
        ):
            modifiers.add(self.advance().value)
        return frozenset(modifiers)

    def skip_decorator(self):
        self.expect(TokenType.AT)
        if self.at(TokenType.LPAREN):
            self.skip_balanced()
        else:
            self.expect_identifier()
            while self.consume(TokenType.DOT):
                self.advance()
        if self.at(TokenType.LESS_THAN):
            self.parse_type_arguments()
        if self.at(TokenType.LPAREN):
            self.skip_balanced()

    def skip_function_declaration(self):
        """Skip `function name<T>(...): R { ... }` or an overload signature."""
        self.advance()
        while not self.at(TokenType.LPAREN) and not self.at(TokenType.EOF):
            if self.at(TokenType.LESS_THAN):
                self.parse_type_parameters()
            else:
                self.advance()
        self.parse_parameters()
        if self.consume(TokenType.COLON):
            self.parse_return_type()
        if self.at(TokenType.LBRACE):
            self.skip_balanced()
        else:
            self.consume(TokenType.SEMICOLON)

    def parse_module_declaration(self, modifiers: FrozenSet[str]) -> ast.ModuleDeclaration:
        self.advance()  # consume namespace / module
        name: Optional[List[str]]
        if self.at(TokenType.STRING_LITERAL):
            self.advance()
            name = None
        else:
            name = [self.expect_identifier()]
            while self.consume(TokenType.DOT):
                name.append(self.expect_identifier())
        if not self.at(TokenType.LBRACE):
            # `declare module "x";` shorthand ambient module.
            self.consume(TokenType.SEMICOLON)
            return ast.ModuleDeclaration(name, [], modifiers)
        return ast.ModuleDeclaration(name, self.parse_block(), modifiers)

    def parse_class_declaration(self, modifiers: FrozenSet[str]) -> ast.ClassDeclaration:
        self.expect(TokenType.IDENTIFIER, "class")
        name = self.expect_identifier()
        type_parameters = self.parse_type_parameters()
        extends = None
        implements: List[ast.TypeReference] = []
        while self.at_identifier("extends", "implements"):
            keyword = self.advance().value
            references = [self.parse_heritage_reference()]
            while self.consume(TokenType.COMMA):
                references.append(self.parse_heritage_reference())
            if keyword == "extends":
                extends = references[0]
            else:
                implements.extend(references)
        members = self.parse_class_body()
        return ast.ClassDeclaration(
            name, type_parameters, extends, implements, members, modifiers
        )

    def parse_interface_declaration(
        self, modifiers: FrozenSet[str]
    ) -> ast.InterfaceDeclaration:
        self.expect(TokenType.IDENTIFIER, "interface")
        name = self.expect_identifier()
        type_parameters = self.parse_type_parameters()
        extends: List[ast.TypeReference] = []
        if self.at_identifier("extends"):
            self.advance()
            extends.append(self.parse_heritage_reference())
            while self.consume(TokenType.COMMA):
                extends.append(self.parse_heritage_reference())
        members = self.parse_type_members()
        return ast.InterfaceDeclaration(
            name, type_parameters, extends, members, modifiers
        )

    def parse_heritage_reference(self) -> ast.TypeReference:
        name = [self.expect_identifier()]
        while self.consume(TokenType.DOT):
            name.append(self.expect_identifier())
        type_arguments = []
        if self.at(TokenType.LESS_THAN):
            type_arguments = self.parse_type_arguments()
        if self.at(TokenType.LPAREN):
            # Mixin calls like `extends Base(Other)` aren't modelled.
            self.skip_balanced()
        return ast.TypeReference(name, type_arguments)

    def parse_enum_declaration(self, modifiers: FrozenSet[str]) -> ast.EnumDeclaration:
        self.expect(TokenType.IDENTIFIER, "enum")
        name = self.expect_identifier()
        self.expect(TokenType.LBRACE)
        members = []
        while not self.at(TokenType.RBRACE):
            member_name = self.parse_property_name()
            if member_name is None:
                raise self.error("Computed enum member names are not supported")
            initializer = None
            if self.consume(TokenType.EQUALS):
                start = self.current_token
                self.skip_expression(frozenset({TokenType.COMMA}))
                end = self.previous_token
                assert end is not None
                initializer = self.source_between(start, end)
            members.append(ast.EnumMember(member_name, initializer))
            if not self.consume(TokenType.COMMA):
                break
        self.expect(TokenType.RBRACE)
        return ast.EnumDeclaration(name, members, modifiers)

    def parse_type_alias_declaration(
        self, modifiers: FrozenSet[str]
    ) -> ast.TypeAliasDeclaration:
        self.expect(TokenType.IDENTIFIER, "type")
        name = self.expect_identifier()
        type_parameters = self.parse_type_parameters()
        self.expect(TokenType.EQUALS)
        type_node = self.parse_type()
        self.consume(TokenType.SEMICOLON)
        return ast.TypeAliasDeclaration(name, type_parameters, type_node, modifiers)

    # ==================== Members ====================

    def parse_property_name(self) -> Optional[str]:
        """Parse a member name. Returns None for computed names."""
        token = self.current_token
        if token.type in (TokenType.IDENTIFIER, TokenType.PRIVATE_NAME):
            self.advance()
            return token.value
        if token.type == TokenType.STRING_LITERAL:
            self.advance()
            return _unquote(token.value)
        if token.type == TokenType.NUMBER_LITERAL:
            self.advance()
            return token.value
        if token.type == TokenType.LBRACKET:
            self.skip_balanced()
            return None
        raise self.error("Expected a member name")

    def at_modifier(self, candidates: FrozenSet[str]) -> bool:
        """Whether the current identifier is a modifier rather than a member
        name, eg `static x` as opposed to `static: number`."""
        if not self.current_token.is_identifier(*candidates):
            return False
        next_token = self.peek()
        if next_token.newline_before:
            return False
        return next_token.type in (
            TokenType.IDENTIFIER,
            TokenType.PRIVATE_NAME,
            TokenType.STRING_LITERAL,
            TokenType.NUMBER_LITERAL,
            TokenType.LBRACKET,
            TokenType.LBRACE,
            TokenType.ELLIPSIS,
        ) or (next_token.type == TokenType.OPERATOR and next_token.value == "*")

    def at_accessor(self) -> bool:
        if not self.at_identifier("get", "set"):
            return False
        next_token = self.peek()
        return not next_token.newline_before and next_token.type in (
            TokenType.IDENTIFIER,
            TokenType.PRIVATE_NAME,
            TokenType.STRING_LITERAL,
            TokenType.NUMBER_LITERAL,
            TokenType.LBRACKET,
        )

    def at_index_signature(self) -> bool:
        return (
            self.at(TokenType.LBRACKET)
            and self.peek().type == TokenType.IDENTIFIER
            and self.peek(2).type == TokenType.COLON
        )

    def parse_class_body(self) -> List[ast.Member]:
        self.expect(TokenType.LBRACE)
        members: List[ast.Member] = []
        while not self.at(TokenType.RBRACE):
            if self.at(TokenType.EOF):
                raise self.error("Expected '}'")
            if self.consume(TokenType.SEMICOLON):
                continue
            members.extend(self.parse_class_member())
        self.expect(TokenType.RBRACE)
        return members

    def parse_class_member(self) -> List[ast.Member]:
        while self.at(TokenType.AT):
            self.skip_decorator()
        line = self.current_token.line
        modifiers: Set[str] = set()
        while self.at_modifier(_MEMBER_MODIFIERS):
            modifiers.add(self.advance().value)
        frozen = frozenset(modifiers)

        if "static" in modifiers and self.at(TokenType.LBRACE):
            self.skip_balanced()
            return []
        if self.at_index_signature():
            return [self.parse_index_signature(frozen, line)]
        if self.at_accessor():
            return [self.parse_accessor(frozen, line, has_body=True)]

        self.consume(TokenType.OPERATOR, "*")
        if self.at_identifier("constructor") and self.peek().type == TokenType.LPAREN:
            self.advance()
            parameters = self.parse_parameters()
            self.skip_method_body()
            constructor = ast.Constructor("constructor", frozen, line, parameters)
            return [constructor] + [
                ast.ParameterProperty(p.name, p.modifiers, line, p)
                for p in parameters
                if p.is_parameter_property
            ]

        name = self.parse_property_name()
        optional = self.consume(TokenType.QUESTION)
        self.consume(TokenType.OPERATOR, "!")

        if self.at(TokenType.LPAREN) or self.at(TokenType.LESS_THAN):
            type_parameters = self.parse_type_parameters()
            parameters = self.parse_parameters()
            return_type = None
            if self.consume(TokenType.COLON):
                return_type = self.parse_return_type()
            self.skip_method_body()
            return [
                ast.MethodDeclaration(
                    name,
                    frozen,
                    line,
                    type_parameters,
                    parameters,
                    return_type,
                    optional,
                )
            ]

        type_node = None
        if self.consume(TokenType.COLON):
            type_node = self.parse_type()
        initializer = None
        if self.consume(TokenType.EQUALS):
            initializer = self.parse_initializer(frozenset({TokenType.SEMICOLON}))
        self.consume(TokenType.SEMICOLON)
        if "accessor" in modifiers:
            return [
                ast.AutoAccessorDeclaration(
                    name, frozen - {"accessor"}, line, type_node, initializer
                )
            ]
        return [
            ast.PropertyDeclaration(
                name, frozen, line, type_node, initializer, optional
            )
        ]

    def skip_method_body(self):
        if self.at(TokenType.LBRACE):
            self.skip_balanced()
        else:
            self.consume(TokenType.SEMICOLON)

    def parse_accessor(
        self, modifiers: FrozenSet[str], line: int, has_body: bool
    ) -> ast.Member:
        keyword = self.advance().value
        name = self.parse_property_name()
        self.parse_type_parameters()
        parameters = self.parse_parameters()
        return_type = None
        if self.consume(TokenType.COLON):
            return_type = self.parse_return_type()
        if has_body:
            self.skip_method_body()
        else:
            self.consume_separator()
        if keyword == "get":
            return ast.GetAccessor(name, modifiers, line, return_type)
        return ast.SetAccessor(name, modifiers, line, parameters)

    def parse_index_signature(
        self, modifiers: FrozenSet[str], line: int
    ) -> ast.IndexSignature:
        self.expect(TokenType.LBRACKET)
        parameters = self.parse_delimited(TokenType.RBRACKET, self.parse_parameter)
        type_node = None
        if self.consume(TokenType.COLON):
            type_node = self.parse_type()
        self.consume_separator()
        return ast.IndexSignature(None, modifiers, line, parameters, type_node)

    def parse_type_members(self) -> List[ast.Member]:
        """Parse the `{ ... }` body of an interface or object type literal."""
        self.expect(TokenType.LBRACE)
        members = []
        while not self.at(TokenType.RBRACE):
            if self.at(TokenType.EOF):
                raise self.error("Expected '}'")
            if self.consume(TokenType.SEMICOLON) or self.consume(TokenType.COMMA):
                continue
            members.append(self.parse_type_member())
        self.expect(TokenType.RBRACE)
        return members

    def parse_type_member(self) -> ast.Member:
        line = self.current_token.line
        if self.at(TokenType.LPAREN) or self.at(TokenType.LESS_THAN):
            type_parameters, parameters, return_type = self.parse_signature()
            self.consume_separator()
            return ast.CallSignature(
                None, frozenset(), line, type_parameters, parameters, return_type
            )
        if self.at_identifier("new") and self.peek().type in (
            TokenType.LPAREN,
            TokenType.LESS_THAN,
        ):
            self.advance()
            type_parameters, parameters, return_type = self.parse_signature()
            self.consume_separator()
            return ast.ConstructSignature(
                None, frozenset(), line, type_parameters, parameters, return_type
            )

        modifiers: Set[str] = set()
        while self.at_modifier(frozenset({"readonly"})):
            modifiers.add(self.advance().value)
        frozen = frozenset(modifiers)
        if self.at_index_signature():
            return self.parse_index_signature(frozen, line)
        if self.at_accessor():
            return self.parse_accessor(frozen, line, has_body=False)

        name = self.parse_property_name()
        optional = self.consume(TokenType.QUESTION)
        if self.at(TokenType.LPAREN) or self.at(TokenType.LESS_THAN):
            type_parameters, parameters, return_type = self.parse_signature()
            self.consume_separator()
            return ast.MethodSignature(
                name, frozen, line, type_parameters, parameters, return_type, optional
            )

        type_node = None
        if self.consume(TokenType.COLON):
            type_node = self.parse_type()
        if not (self.at_statement_end() or self.at(TokenType.RBRACE)):
            raise self.error("Expected ';'")
        self.consume_separator()
        return ast.PropertySignature(name, frozen, line, type_node, optional)

    def parse_signature(self):
        type_parameters = self.parse_type_parameters()
        parameters = self.parse_parameters()
        return_type = None
        if self.consume(TokenType.COLON):
            return_type = self.parse_return_type()
        return type_parameters, parameters, return_type

    # ==================== Parameters ====================

    def parse_type_parameters(self) -> List[ast.TypeParameter]:
        if not self.consume(TokenType.LESS_THAN):
            return []
        return self.parse_delimited(TokenType.GREATER_THAN, self.parse_type_parameter)

    def parse_type_parameter(self) -> ast.TypeParameter:
        while self.at_identifier("const", "in", "out") and (
            self.peek().type == TokenType.IDENTIFIER
        ):
            self.advance()
        name = self.expect_identifier()
        constraint = None
        default = None
        if self.at_identifier("extends"):
            self.advance()
            constraint = self.parse_type()
        if self.consume(TokenType.EQUALS):
            default = self.parse_type()
        return ast.TypeParameter(name, constraint, default)

    def parse_parameters(self) -> List[ast.Parameter]:
        self.expect(TokenType.LPAREN)
        parameters = self.parse_delimited(TokenType.RPAREN, self.parse_parameter)
        return [p for p in parameters if p.name != "this"]

    def parse_parameter(self) -> ast.Parameter:
        while self.at(TokenType.AT):
            self.skip_decorator()
        modifiers: Set[str] = set()
        while self.at_modifier(_PARAMETER_MODIFIERS):
            modifiers.add(self.advance().value)
        rest = self.consume(TokenType.ELLIPSIS)

        start = self.current_token
        if self.at(TokenType.LBRACE) or self.at(TokenType.LBRACKET):
            self.skip_balanced()
            end = self.previous_token
            assert end is not None
            name = self.source_between(start, end)
        else:
            name = self.expect_identifier()

        optional = self.consume(TokenType.QUESTION)
        type_node = None
        if self.consume(TokenType.COLON):
            type_node = self.parse_type()
        initializer = None
        if self.consume(TokenType.EQUALS):
            initializer = self.parse_initializer(frozenset({TokenType.COMMA}))
        return ast.Parameter(
            name, type_node, optional, rest, frozenset(modifiers), initializer
        )

    # ==================== Initializers ====================

    def parse_initializer(self, terminators: FrozenSet[TokenType]) -> ast.Initializer:
        """Parse an initializer expression far enough to infer its type.

        Expressions beyond the simple shapes below become `OtherInitializer`."""
        start_position = self.position
        start = self.current_token
        initializer = self.parse_simple_initializer()
        if initializer is not None and (
            self.at_statement_end()
            or self.current_token.type in terminators
            or self.current_token.type in _CLOSING
        ):
            return initializer

        if self.position == start_position and self.current_token.type in terminators:
            raise self.error("Expected an expression")
        self.skip_expression(terminators)
        end = self.previous_token
        assert end is not None
        return ast.OtherInitializer(self.source_between(start, end))

    def parse_simple_initializer(self) -> Optional[ast.Initializer]:
        token = self.current_token
        if token.type == TokenType.NUMBER_LITERAL:
            self.advance()
            return ast.LiteralInitializer(token.value, "number")
        if token.type == TokenType.MINUS and self.peek().type == TokenType.NUMBER_LITERAL:
            self.advance()
            return ast.LiteralInitializer("-" + self.advance().value, "number")
        if token.type in (TokenType.STRING_LITERAL, TokenType.TEMPLATE_LITERAL):
            self.advance()
            return ast.LiteralInitializer(token.value, "string")
        if token.is_identifier("true", "false"):
            self.advance()
            return ast.LiteralInitializer(token.value, "boolean")
        if token.is_identifier("null", "undefined"):
            self.advance()
            return ast.LiteralInitializer(token.value, token.value)
        if token.is_identifier("new") and self.peek().type == TokenType.IDENTIFIER:
            self.advance()
            name = [self.expect_identifier()]
            while self.at(TokenType.DOT) and self.peek().type == TokenType.IDENTIFIER:
                self.advance()
                name.append(self.expect_identifier())
            type_arguments = []
            if self.at(TokenType.LESS_THAN):
                type_arguments = self.parse_type_arguments()
            if self.at(TokenType.LPAREN):
                self.skip_balanced()
            return ast.NewInitializer(name, type_arguments)
        if token.type == TokenType.LBRACKET:
            self.advance()
            elements = []
            while not self.at(TokenType.RBRACKET):
                if self.at(TokenType.COMMA):
                    self.advance()
                    continue
                elements.append(
                    self.parse_initializer(
                        frozenset({TokenType.COMMA, TokenType.RBRACKET})
                    )
                )
                if not self.consume(TokenType.COMMA):
                    break
            self.expect(TokenType.RBRACKET)
            return ast.ArrayInitializer(elements)
        if token.is_identifier("function") or token.is_identifier("async"):
            return self.parse_function_initializer()
        if token.type == TokenType.LPAREN or token.type == TokenType.LESS_THAN:
            return self.parse_function_initializer()
        if token.type == TokenType.IDENTIFIER and self.peek().type == TokenType.ARROW:
            name = self.advance().value
            self.advance()
            self.skip_arrow_body()
            return ast.FunctionInitializer([], [ast.Parameter(name)], None)
        return None

    def parse_function_initializer(self) -> Optional[ast.Initializer]:
        """Parse an arrow function or function expression. Returns None, with
        no tokens consumed, if the tokens turn out to be something else."""
        start_position = self.position
        self.consume(TokenType.IDENTIFIER, "async")
        if self.at_identifier("function"):
            self.advance()
            self.consume(TokenType.OPERATOR, "*")
            self.consume(TokenType.IDENTIFIER)
            type_parameters, parameters, return_type = self.parse_signature()
            if not self.at(TokenType.LBRACE):
                raise self.error("Expected '{'")
            self.skip_balanced()
            return ast.FunctionInitializer(type_parameters, parameters, return_type)

        if self.at(TokenType.IDENTIFIER) and self.peek().type == TokenType.ARROW:
            name = self.advance().value
            self.advance()
            self.skip_arrow_body()
            return ast.FunctionInitializer([], [ast.Parameter(name)], None)
        if not self.is_arrow_function():
            self.position = start_position
            self.current_token = self.tokens[start_position]
            return None
        type_parameters, parameters, return_type = self.parse_signature()
        self.expect(TokenType.ARROW)
        self.skip_arrow_body()
        return ast.FunctionInitializer(type_parameters, parameters, return_type)

    def is_arrow_function(self) -> bool:
        """Look ahead from `(` or `<` for the `=>` of an arrow function."""
        offset = 0
        if self.peek(0).type == TokenType.LESS_THAN:
            depth = 0
            while True:
                token = self.peek(offset)
                if token.type == TokenType.LESS_THAN:
                    depth += 1
                elif token.type == TokenType.GREATER_THAN:
                    depth -= 1
                    if depth == 0:
                        break
                elif token.type == TokenType.EOF:
                    return False
                offset += 1
            offset += 1
        if self.peek(offset).type != TokenType.LPAREN:
            return False
        offset = self.matching_offset(offset)
        if offset is None:
            return False
        following = self.peek(offset + 1)
        return following.type in (TokenType.ARROW, TokenType.COLON)

    def matching_offset(self, offset: int) -> Optional[int]:
        """Offset of the bracket closing the one at `offset`."""
        depth = 0
        while True:
            token = self.peek(offset)
            if token.type in _OPENING:
                depth += 1
            elif token.type in _CLOSING:
                depth -= 1
                if depth == 0:
                    return offset
            elif token.type == TokenType.EOF:
                return None
            offset += 1

    def skip_arrow_body(self):
        if self.at(TokenType.LBRACE):
            self.skip_balanced()
        else:
            self.skip_expression(frozenset({TokenType.SEMICOLON, TokenType.COMMA}))

    # ==================== Types ====================

    def parse_type(self) -> ast.TypeNode:
        """Parse a type annotation."""
        if self.is_start_of_function_type():
            return self.parse_function_type()
        checked = self.parse_union_type()
        if self.at_identifier("extends") and not self.current_token.newline_before:
            # Conditional types: `A extends B ? C : D`.
            self.advance()
            self.parse_union_type()
            self.expect(TokenType.QUESTION)
            self.parse_type()
            self.expect(TokenType.COLON)
            self.parse_type()
            return ast.OpaqueType("conditional")
        return checked

    def parse_return_type(self) -> ast.TypeNode:
        """Parse a return type, which may be a type predicate."""
        if self.at_identifier("asserts") and self.peek().type == TokenType.IDENTIFIER:
            self.advance()
            self.advance()
            if self.at_identifier("is"):
                self.advance()
                self.parse_type()
            return ast.KeywordType("void")
        if (
            self.current_token.type == TokenType.IDENTIFIER
            and self.peek().is_identifier("is")
            and not self.peek().newline_before
        ):
            self.advance()
            self.advance()
            self.parse_type()
            return ast.KeywordType("boolean")
        return self.parse_type()

    def is_start_of_function_type(self) -> bool:
        if self.at(TokenType.LESS_THAN):
            return True
        if self.at_identifier("new"):
            return True
        if self.at_identifier("abstract") and self.peek().is_identifier("new"):
            return True
        if not self.at(TokenType.LPAREN):
            return False
        offset = self.matching_offset(0)
        return offset is not None and self.peek(offset + 1).type == TokenType.ARROW

    def parse_function_type(self) -> ast.FunctionType:
        self.consume(TokenType.IDENTIFIER, "abstract")
        is_constructor = self.consume(TokenType.IDENTIFIER, "new")
        type_parameters = self.parse_type_parameters()
        parameters = self.parse_parameters()
        self.expect(TokenType.ARROW)
        return_type = self.parse_return_type()
        return ast.FunctionType(type_parameters, parameters, return_type, is_constructor)

    def parse_union_type(self) -> ast.TypeNode:
        """Parse union type: A | B | C."""
        self.consume(TokenType.PIPE)
        left = self.parse_intersection_type()

        if self.at(TokenType.PIPE):
            types = [left]
            while self.consume(TokenType.PIPE):
                types.append(self.parse_intersection_type())
            return ast.UnionType(types)

        return left

    def parse_intersection_type(self) -> ast.TypeNode:
        """Parse intersection type: A & B & C."""
        self.consume(TokenType.AMPERSAND)
        left = self.parse_type_operator()

        if self.at(TokenType.AMPERSAND):
            types = [left]
            while self.consume(TokenType.AMPERSAND):
                types.append(self.parse_type_operator())
            return ast.IntersectionType(types)

        return left

    def parse_type_operator(self) -> ast.TypeNode:
        if self.at_identifier("keyof", "unique", "infer") and (
            self.peek().type == TokenType.IDENTIFIER
            or self.peek().type == TokenType.LPAREN
        ):
            keyword = self.advance().value
            self.parse_type_operator()
            return ast.OpaqueType(keyword)
        if self.at_identifier("readonly") and self.peek().type in (
            TokenType.IDENTIFIER,
            TokenType.LBRACKET,
            TokenType.LPAREN,
        ):
            self.advance()
        if self.is_start_of_function_type():
            return self.parse_function_type()
        return self.parse_postfix_type()

    def parse_postfix_type(self) -> ast.TypeNode:
        """Parse array type: T[], and indexed access types: T[K]."""
        base = self.parse_primary_type()

        while self.at(TokenType.LBRACKET) and not self.current_token.newline_before:
            self.advance()  # consume [
            if self.consume(TokenType.RBRACKET):
                base = ast.ArrayType(base)
            else:
                self.parse_type()
                self.expect(TokenType.RBRACKET)
                base = ast.OpaqueType("indexed access")

        return base

    def parse_primary_type(self) -> ast.TypeNode:
        """Parse primary types: identifiers, literals, parenthesized, etc."""
        token = self.current_token

        if token.type == TokenType.LPAREN:
            self.advance()
            inner = self.parse_type()
            self.expect(TokenType.RPAREN)
            return ast.ParenthesizedType(inner)

        if token.type == TokenType.LBRACKET:
            self.advance()
            elements = self.parse_delimited(TokenType.RBRACKET, self.parse_tuple_element)
            return ast.TupleType(elements)

        if token.type == TokenType.LBRACE:
            if self.is_start_of_mapped_type():
                self.skip_balanced()
                return ast.OpaqueType("mapped")
            return ast.TypeLiteral(self.parse_type_members())

        if token.type == TokenType.STRING_LITERAL:
            self.advance()
            return ast.LiteralType(token.value, "string")

        if token.type == TokenType.TEMPLATE_LITERAL:
            self.advance()
            return ast.OpaqueType("template literal")

        if token.type == TokenType.NUMBER_LITERAL:
            self.advance()
            return ast.LiteralType(token.value, "number")

        if token.type == TokenType.MINUS and self.peek().type == TokenType.NUMBER_LITERAL:
            self.advance()
            return ast.LiteralType("-" + self.advance().value, "number")

        if token.type != TokenType.IDENTIFIER:
            raise self.error("Expected a type")

        if token.value in ("true", "false"):
            self.advance()
            return ast.LiteralType(token.value, "boolean")

        if token.value == "typeof":
            self.advance()
            if self.at_identifier("import"):
                self.parse_import_type()
            else:
                self.expect_identifier()
                while self.consume(TokenType.DOT):
                    self.advance()
            if self.at(TokenType.LESS_THAN) and not self.current_token.newline_before:
                self.parse_type_arguments()
            return ast.OpaqueType("typeof")

        if token.value == "import" and self.peek().type == TokenType.LPAREN:
            self.parse_import_type()
            return ast.OpaqueType("import")

        if token.value in _KEYWORD_TYPES and self.peek().type != TokenType.DOT:
            self.advance()
            return ast.KeywordType(token.value)

        # Type references, including qualified names like Shapes.Circle.
        self.advance()
        name = [token.value]
        while self.at(TokenType.DOT):
            self.advance()  # consume .
            name.append(self.expect_identifier())
        type_arguments = []
        if self.at(TokenType.LESS_THAN) and not self.current_token.newline_before:
            type_arguments = self.parse_type_arguments()
        return ast.TypeReference(name, type_arguments)

    def parse_import_type(self):
        self.expect(TokenType.IDENTIFIER, "import")
        self.skip_balanced()
        while self.consume(TokenType.DOT):
            self.expect_identifier()
        if self.at(TokenType.LESS_THAN):
            self.parse_type_arguments()

    def parse_tuple_element(self) -> ast.TypeNode:
        self.consume(TokenType.ELLIPSIS)
        # Named members like `[x: number, y?: number]`.
        if self.current_token.type == TokenType.IDENTIFIER and self.peek().type in (
            TokenType.COLON,
            TokenType.QUESTION,
        ):
            if self.peek().type == TokenType.COLON or (
                self.peek(2).type == TokenType.COLON
            ):
                self.advance()
                self.consume(TokenType.QUESTION)
                self.expect(TokenType.COLON)
        element = self.parse_type()
        self.consume(TokenType.QUESTION)
        return element

    def is_start_of_mapped_type(self) -> bool:
        offset = 1
        if self.peek(offset).is_identifier("readonly") or (
            self.peek(offset).type in (TokenType.PLUS, TokenType.MINUS)
        ):
            offset += 1
            if self.peek(offset).is_identifier("readonly"):
                offset += 1
        return (
            self.peek(offset).type == TokenType.LBRACKET
            and self.peek(offset + 1).type == TokenType.IDENTIFIER
            and self.peek(offset + 2).is_identifier("in")
        )

    def parse_type_arguments(self) -> List[ast.TypeNode]:
        self.expect(TokenType.LESS_THAN)
        return self.parse_delimited(TokenType.GREATER_THAN, self.parse_type)


def _unquote(literal: str) -> str:
    """The value of a string literal token, with simple escapes resolved."""
    body = literal[1:-1]
    if "\\" not in body:
        return body
    out = []
    chars = iter(body)
    for char in chars:
        if char == "\\":
            escaped = next(chars, "")
            out.append({"n": "\n", "t": "\t", "r": "\r", "0": "\0"}.get(escaped, escaped))
        else:
            out.append(char)
    return "".join(out)


def parse_source(text: str, path: Union[str, Path] = "<string>") -> ast.SourceFile:
    """Parse TypeScript source text.

    Raises:
        TypeScriptSyntaxError: if the declarations in `text` are malformed.
    """
    tokens = Lexer(text, path).tokenize()
    return TypeScriptParser(tokens, text, path).parse_source_file()
