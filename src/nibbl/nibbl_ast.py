"""
Defines the abstract syntax tree (AST) node types for the nibbl programming language.

Node hierarchy:
    Node
    ├── Statement: LetStatement, ReturnStatement, ExpressionStatement, BlockStatement
    ├── Expression: Identifier, IntegerLiteral, Boolean, PrefixExpression,
    │               InfixExpression, IfExpression, FunctionLiteral, CallExpression
    └── Program: the root, an ordered list of Statements

Every node keeps the token that introduced it and supports:
    str(node): source-like rendering. Prefix and infix operations are fully
        parenthesized, so the text shows exactly how the parser grouped them.
    node == other: structural equality over the node fields (tokens are ignored).
    to_dict(): conversion to a plain, JSON-compatible NodeDict.

Usage:
    This module is the parser's output format and the input format of any
    downstream evaluator. Tests assert tree shape through `str()`.

Example:
    >>> program, errors = parse("let x = 1 + 2 * 3;")
    >>> str(program)
    'let x = (1 + (2 * 3));'
"""

from typing import Any, TypedDict

from nibbl.nibbl_lexer import Token


class NodeDict(TypedDict, total=False):
    """
    TypedDict representation of a node used for serialization.

    Fields:
        kind (str): The node class name (e.g., "LetStatement", "InfixExpression").
        token (str): The literal of the token that introduced the node.
        line (int): Line number where the node originates.
        col (int): Column number where the node originates.
        value (Any): Literal payload for identifiers, integers and booleans.
        operator (str): Operator text for prefix and infix expressions.
        name, left, right, condition, function, body, ... : child nodes.
    """

    kind: str
    token: str
    line: int
    col: int
    value: Any
    operator: str
    name: "NodeDict"
    expression: "NodeDict"
    left: "NodeDict"
    right: "NodeDict"
    condition: "NodeDict"
    consequence: "NodeDict"
    alternative: "NodeDict | None"
    function: "NodeDict"
    body: "NodeDict"
    parameters: list["NodeDict"]
    arguments: list["NodeDict"]
    statements: list["NodeDict"]


class Node:
    """
    Base class of every AST node.

    Subclasses list their child/payload attributes in `fields`; equality,
    `repr()` and `to_dict()` are derived from that list.

    Attributes:
        token (Token): The token that introduced the node.
    """

    fields: tuple[str, ...] = ()

    def __init__(self, token: Token) -> None:
        self.token = token

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        raise NotImplementedError(f"{type(self).__name__} does not define a rendering")

    def __repr__(self) -> str:
        parts = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.fields)
        return f"{type(self).__name__}({parts})"

    def __eq__(self, other: Any) -> bool:
        if type(self) is not type(other):
            return False
        return all(getattr(self, name) == getattr(other, name) for name in self.fields)

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> NodeDict:
        data: dict[str, Any] = {
            "kind": type(self).__name__,
            "token": self.token.literal,
            "line": self.token.line,
            "col": self.token.col,
        }
        for name in self.fields:
            data[name] = _serialize(getattr(self, name))
        return data  # type: ignore[return-value]


def _serialize(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    return value


class Statement(Node):
    """A node that can appear in a Program or a block."""


class Expression(Node):
    """A node that produces a value."""


# Expressions


class Identifier(Expression):
    fields = ("value",)

    def __init__(self, token: Token, value: str) -> None:
        super().__init__(token)
        self.value = value

    def __str__(self) -> str:
        return self.value


class IntegerLiteral(Expression):
    fields = ("value",)

    def __init__(self, token: Token, value: int) -> None:
        super().__init__(token)
        self.value = value

    def __str__(self) -> str:
        return self.token.literal


class Boolean(Expression):
    fields = ("value",)

    def __init__(self, token: Token, value: bool) -> None:
        super().__init__(token)
        self.value = value

    def __str__(self) -> str:
        return self.token.literal


class PrefixExpression(Expression):
    fields = ("operator", "right")

    def __init__(self, token: Token, operator: str, right: Expression) -> None:
        super().__init__(token)
        self.operator = operator
        self.right = right

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


class InfixExpression(Expression):
    fields = ("left", "operator", "right")

    def __init__(
        self, token: Token, left: Expression, operator: str, right: Expression
    ) -> None:
        super().__init__(token)
        self.left = left
        self.operator = operator
        self.right = right

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


class IfExpression(Expression):
    fields = ("condition", "consequence", "alternative")

    def __init__(
        self,
        token: Token,
        condition: Expression,
        consequence: "BlockStatement",
        alternative: "BlockStatement | None" = None,
    ) -> None:
        super().__init__(token)
        self.condition = condition
        self.consequence = consequence
        self.alternative = alternative

    def __str__(self) -> str:
        out = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            out += f" else {self.alternative}"
        return out


class FunctionLiteral(Expression):
    fields = ("parameters", "body")

    def __init__(
        self, token: Token, parameters: list[Identifier], body: "BlockStatement"
    ) -> None:
        super().__init__(token)
        self.parameters = parameters
        self.body = body

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token.literal}({params}) {self.body}"


class CallExpression(Expression):
    fields = ("function", "arguments")

    def __init__(
        self, token: Token, function: Expression, arguments: list[Expression]
    ) -> None:
        super().__init__(token)
        self.function = function
        self.arguments = arguments

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


# Statements


class LetStatement(Statement):
    fields = ("name", "value")

    def __init__(self, token: Token, name: Identifier, value: Expression) -> None:
        super().__init__(token)
        self.name = name
        self.value = value

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.name} = {self.value};"


class ReturnStatement(Statement):
    fields = ("value",)

    def __init__(self, token: Token, value: Expression) -> None:
        super().__init__(token)
        self.value = value

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.value};"


class ExpressionStatement(Statement):
    """A bare expression used as a statement. Its token is the expression's first token."""

    fields = ("expression",)

    def __init__(self, token: Token, expression: Expression) -> None:
        super().__init__(token)
        self.expression = expression

    def __str__(self) -> str:
        return str(self.expression)


class BlockStatement(Statement):
    """A `{ ... }` body of an if/else branch or a function literal.

    Expression statements are written with a trailing `;` so that adjacent
    expressions inside the braces are not read back as a call.
    """

    fields = ("statements",)

    def __init__(self, token: Token, statements: list[Statement] | None = None) -> None:
        super().__init__(token)
        self.statements: list[Statement] = statements if statements is not None else []

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        body = " ".join(
            f"{s};" if isinstance(s, ExpressionStatement) else str(s)
            for s in self.statements
        )
        return f"{{ {body} }}"


class Program:
    """Root of the tree: the top-level statements in source order."""

    def __init__(self, statements: list[Statement] | None = None) -> None:
        self.statements: list[Statement] = statements if statements is not None else []

    def token_literal(self) -> str:
        return self.statements[0].token_literal() if self.statements else ""

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)

    def __repr__(self) -> str:
        return f"Program(statements={self.statements!r})"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Program) and self.statements == other.statements

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> list[NodeDict]:
        return [s.to_dict() for s in self.statements]


__all__ = [
    "Boolean",
    "BlockStatement",
    "CallExpression",
    "Expression",
    "ExpressionStatement",
    "FunctionLiteral",
    "Identifier",
    "IfExpression",
    "InfixExpression",
    "IntegerLiteral",
    "LetStatement",
    "Node",
    "NodeDict",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
]
