"""
nibbl Language Parser

Parses the nibbl token stream into a `Program` of typed AST nodes.

Statements are parsed by recursive descent, one rule per leading keyword.
Expressions use Pratt parsing (precedence climbing): every token kind that can
start an expression has a *prefix* parse function, every operator that can
follow a left operand has an *infix* parse function, and a precedence table
decides whether an operator is absorbed into the expression being built or left
to an outer call.

Supported Constructs
--------------------
- Statements:
    * `let <ident> = <expr>;`
    * `return <expr>;`
    * expression statements
    * `{ ... }` blocks (bodies of `if` and `fn`)
- Expressions:
    * identifiers, integers, `true` / `false`
    * prefix `!` and `-`
    * infix `+ - * / < > == !=`, all left-associative
    * grouping `( ... )`
    * `if (<cond>) { ... } else { ... }`
    * `fn(<params>) { ... }` and calls `<callee>(<args>)`

Parser Behavior
---------------
- Tokens are pulled from the lexer one at a time; the parser keeps exactly one
  token of lookahead (`peek`) and never backtracks.
- Errors never raise. They are appended to `Parser.errors` and the statement
  being parsed is dropped. The trailing `;` of a statement is optional.
- Every statement attempt advances at least one token, so parsing always ends.
- Expressions nested deeper than `MAX_NESTING` levels are rejected with an
  error instead of exhausting the Python call stack.

Entry Points
------------
- `parse(source)`: lex + parse a source string, returning `(Program, errors)`.
- `Parser.parse_program()`: parse everything a given lexer produces.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum

from nibbl.nibbl_ast import (
    BlockStatement,
    Boolean,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
)
from nibbl.nibbl_constants import TokenType
from nibbl.nibbl_lexer import CharacterStream, Lexer, Token

PrefixParseFn = Callable[[], Expression | None]
InfixParseFn = Callable[[Expression], Expression | None]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Deepest chain of nested sub-expressions (prefix operands, groups, blocks).
MAX_NESTING = 100


class Precedence(IntEnum):
    """Binding strength of operators; higher binds tighter."""

    LOWEST = 1
    EQUALS = 2  # ==
    LESSGREATER = 3  # > or <
    SUM = 4  # +
    PRODUCT = 5  # *
    PREFIX = 6  # -x or !x
    CALL = 7  # f(x)


precedences: dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
}


class Parser:
    """
    nibbl Parser Class

    Attributes
    ----------
    lexer : Lexer
        Source of tokens, read lazily.
    current : Token
        The token under examination.
    peek : Token
        The token right after `current`.
    errors : list[str]
        Parse errors in the order they were found.
    depth : int
        Number of `parse_expression` calls currently open.
    prefix_parse_fns : dict[TokenType, PrefixParseFn]
        Rules for tokens that start an expression.
    infix_parse_fns : dict[TokenType, InfixParseFn]
        Rules for tokens that follow a left operand.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.errors: list[str] = []
        self.depth = 0
        self.prefix_parse_fns: dict[TokenType, PrefixParseFn] = {}
        self.infix_parse_fns: dict[TokenType, InfixParseFn] = {}

        self.register_prefix(TokenType.IDENT, self.parse_identifier)
        self.register_prefix(TokenType.INT, self.parse_integer_literal)
        self.register_prefix(TokenType.BANG, self.parse_prefix_expression)
        self.register_prefix(TokenType.MINUS, self.parse_prefix_expression)
        self.register_prefix(TokenType.TRUE, self.parse_boolean)
        self.register_prefix(TokenType.FALSE, self.parse_boolean)
        self.register_prefix(TokenType.LPAREN, self.parse_grouped_expression)
        self.register_prefix(TokenType.IF, self.parse_if_expression)
        self.register_prefix(TokenType.FUNCTION, self.parse_function_literal)

        for op in (
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.SLASH,
            TokenType.ASTERISK,
            TokenType.EQ,
            TokenType.NOT_EQ,
            TokenType.LT,
            TokenType.GT,
        ):
            self.register_infix(op, self.parse_infix_expression)
        self.register_infix(TokenType.LPAREN, self.parse_call_expression)

        # Fill current and peek
        self.current: Token = self.lexer.next_token()
        self.peek: Token = self.lexer.next_token()

    def register_prefix(self, token_type: TokenType, fn: PrefixParseFn) -> None:
        self.prefix_parse_fns[token_type] = fn

    def register_infix(self, token_type: TokenType, fn: InfixParseFn) -> None:
        self.infix_parse_fns[token_type] = fn

    # Token cursor

    def next_token(self) -> None:
        self.current = self.peek
        self.peek = self.lexer.next_token()

    def current_is(self, token_type: TokenType) -> bool:
        return self.current.type == token_type

    def peek_is(self, token_type: TokenType) -> bool:
        return self.peek.type == token_type

    def expect_peek(self, token_type: TokenType) -> bool:
        """Advance if `peek` has the given type, otherwise record an error."""
        if self.peek_is(token_type):
            self.next_token()
            return True
        self.peek_error(token_type)
        return False

    def peek_precedence(self) -> Precedence:
        return precedences.get(self.peek.type, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return precedences.get(self.current.type, Precedence.LOWEST)

    # Errors

    def peek_error(self, token_type: TokenType) -> None:
        self.errors.append(
            f"expected next token to be {token_type}, got {self.peek.type} instead"
        )

    def no_prefix_parse_fn_error(self, token_type: TokenType) -> None:
        self.errors.append(f"no prefix parse function for {token_type} found")

    # Statements

    def parse_program(self) -> Program:
        """Parse statements until EOF and return them as a Program."""
        program = Program()
        while not self.current_is(TokenType.EOF):
            statement = self.parse_statement()
            if statement is not None:
                program.statements.append(statement)
            self.next_token()
        return program

    def parse_statement(self) -> Statement | None:
        if self.current_is(TokenType.LET):
            return self.parse_let_statement()
        if self.current_is(TokenType.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def skip_semicolon(self) -> None:
        if self.peek_is(TokenType.SEMICOLON):
            self.next_token()

    def parse_let_statement(self) -> LetStatement | None:
        token = self.current

        if not self.expect_peek(TokenType.IDENT):
            return None
        name = Identifier(self.current, self.current.literal)

        if not self.expect_peek(TokenType.ASSIGN):
            return None

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        self.skip_semicolon()
        return LetStatement(token, name, value)

    def parse_return_statement(self) -> ReturnStatement | None:
        token = self.current
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        self.skip_semicolon()
        return ReturnStatement(token, value)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        token = self.current
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        self.skip_semicolon()
        return ExpressionStatement(token, expression)

    def parse_block_statement(self) -> BlockStatement | None:
        """Parse `{ ... }` with `current` on the opening brace."""
        block = BlockStatement(self.current)
        self.next_token()

        while not self.current_is(TokenType.RBRACE):
            if self.current_is(TokenType.EOF):
                self.errors.append(
                    f"expected next token to be {TokenType.RBRACE}, got {TokenType.EOF} instead"
                )
                return None
            statement = self.parse_statement()
            if statement is not None:
                block.statements.append(statement)
            self.next_token()

        return block

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        """Pratt loop: parse a prefix, then fold in operators binding tighter than `precedence`."""
        if self.depth >= MAX_NESTING:
            self.errors.append("expression nested too deeply")
            return None

        prefix = self.prefix_parse_fns.get(self.current.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.current.type)
            return None

        self.depth += 1
        try:
            left = prefix()

            while (
                left is not None
                and not self.peek_is(TokenType.SEMICOLON)
                and precedence < self.peek_precedence()
            ):
                infix = self.infix_parse_fns.get(self.peek.type)
                if infix is None:
                    return left
                self.next_token()
                left = infix(left)

            return left
        finally:
            self.depth -= 1

    def parse_identifier(self) -> Expression:
        return Identifier(self.current, self.current.literal)

    def parse_integer_literal(self) -> Expression | None:
        token = self.current
        try:
            value = int(token.literal)
        except ValueError:
            value = None
        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.errors.append(f'could not parse "{token.literal}" as integer')
            return None
        return IntegerLiteral(token, value)

    def parse_boolean(self) -> Expression:
        return Boolean(self.current, self.current_is(TokenType.TRUE))

    def parse_prefix_expression(self) -> Expression | None:
        token = self.current
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(token, token.literal, right)

    def parse_infix_expression(self, left: Expression) -> Expression | None:
        token = self.current
        precedence = self.current_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(token, left, token.literal, right)

    def parse_grouped_expression(self) -> Expression | None:
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if not self.expect_peek(TokenType.RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> Expression | None:
        token = self.current

        if not self.expect_peek(TokenType.LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self.expect_peek(TokenType.RPAREN):
            return None

        if not self.expect_peek(TokenType.LBRACE):
            return None
        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_is(TokenType.ELSE):
            self.next_token()
            if not self.expect_peek(TokenType.LBRACE):
                return None
            alternative = self.parse_block_statement()
            if alternative is None:
                return None

        return IfExpression(token, condition, consequence, alternative)

    def parse_function_literal(self) -> Expression | None:
        token = self.current

        if not self.expect_peek(TokenType.LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(TokenType.LBRACE):
            return None
        body = self.parse_block_statement()
        if body is None:
            return None

        return FunctionLiteral(token, parameters, body)

    def parse_function_parameters(self) -> list[Identifier] | None:
        """Parse `(a, b, c)` with `current` on the opening parenthesis."""
        parameters: list[Identifier] = []

        if self.peek_is(TokenType.RPAREN):
            self.next_token()
            return parameters

        if not self.expect_peek(TokenType.IDENT):
            return None
        parameters.append(Identifier(self.current, self.current.literal))

        while self.peek_is(TokenType.COMMA):
            self.next_token()
            if not self.expect_peek(TokenType.IDENT):
                return None
            parameters.append(Identifier(self.current, self.current.literal))

        if not self.expect_peek(TokenType.RPAREN):
            return None
        return parameters

    def parse_call_expression(self, function: Expression) -> Expression | None:
        token = self.current
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(token, function, arguments)

    def parse_call_arguments(self) -> list[Expression] | None:
        """Parse `(x, y + 1)` with `current` on the opening parenthesis."""
        arguments: list[Expression] = []

        if self.peek_is(TokenType.RPAREN):
            self.next_token()
            return arguments

        self.next_token()
        argument = self.parse_expression(Precedence.LOWEST)
        if argument is None:
            return None
        arguments.append(argument)

        while self.peek_is(TokenType.COMMA):
            self.next_token()
            self.next_token()
            argument = self.parse_expression(Precedence.LOWEST)
            if argument is None:
                return None
            arguments.append(argument)

        if not self.expect_peek(TokenType.RPAREN):
            return None
        return arguments


def parse(source: str) -> tuple[Program, list[str]]:
    """Parse nibbl source text.

    Returns:
        The (possibly partial) Program and the list of parse errors. An empty
        error list means the whole input was understood.
    """
    parser = Parser(Lexer(CharacterStream(source)))
    program = parser.parse_program()
    return program, parser.errors


__all__ = ["Parser", "Precedence", "parse", "precedences"]
