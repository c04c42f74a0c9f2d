"""Formula engine for TAC formulas.

Formulas are free-text arithmetic over transaction variables, for example
``Val_ded + Val_neded`` or ``T.Val_Valuta * 1.19``. The grammar is::

    expr    := term (('+' | '-') term)*
    term    := factor (('*' | '/') factor)*
    factor  := ('+' | '-') factor | primary
    primary := NUMBER | NAME | DOTTED_NAME | '(' expr ')'

Evaluation never raises. Unresolved variables count as 0, string values
count as 0 inside a larger expression, and anything that cannot be parsed
or evaluated to a finite number yields None. Formulas nested more than
MAX_NESTING levels deep are rejected as invalid.
"""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from salarizare.domain.errors import ValidationError

logger = logging.getLogger(__name__)

FormulaResult = Union[Decimal, str, None]

# Characters outside this alphabet are dropped before tokenizing.
_DISALLOWED = re.compile(r"[^A-Za-z0-9_.+\-*/()\s]")

# Parentheses and unary signs nested deeper than this are rejected.
MAX_NESTING = 100

_TOKEN = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<number>\d+(?:\.\d*)?|\.\d+)
  | (?P<name>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)
  | (?P<op>[+\-*/()])
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int


@dataclass(frozen=True)
class Number:
    value: Decimal


@dataclass(frozen=True)
class Reference:
    """A variable reference; ``parts`` has more than one item when dotted."""

    parts: tuple[str, ...]

    @property
    def name(self) -> str:
        return ".".join(self.parts)


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"


Node = Union[Number, Reference, UnaryOp, BinaryOp]


def tokenize(formula: str) -> list[Token]:
    """Split a formula into tokens.

    Raises:
        ValidationError: If a character sequence is not a valid token
    """
    text = _DISALLOWED.sub("", formula)
    tokens = []
    pos = 0
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:
            raise ValidationError(f"Unexpected character {text[pos]!r} at position {pos}")
        kind = match.lastgroup
        if kind != "ws":
            tokens.append(Token(kind=kind, text=match.group(), pos=pos))
        pos = match.end()
    return tokens


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.index = 0
        self.depth = 0

    def _peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _nest(self) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise ValidationError("Formula is nested too deeply")

    def _accept(self, *ops: str) -> Optional[Token]:
        token = self._peek()
        if token is not None and token.kind == "op" and token.text in ops:
            return self._advance()
        return None

    def parse(self) -> Node:
        node = self._expr()
        token = self._peek()
        if token is not None:
            raise ValidationError(f"Unexpected {token.text!r} at position {token.pos}")
        return node

    def _expr(self) -> Node:
        node = self._term()
        while True:
            token = self._accept("+", "-")
            if token is None:
                return node
            node = BinaryOp(token.text, node, self._term())

    def _term(self) -> Node:
        node = self._factor()
        while True:
            token = self._accept("*", "/")
            if token is None:
                return node
            node = BinaryOp(token.text, node, self._factor())

    def _factor(self) -> Node:
        token = self._accept("+", "-")
        if token is not None:
            self._nest()
            node = UnaryOp(token.text, self._factor())
            self.depth -= 1
            return node
        return self._primary()

    def _primary(self) -> Node:
        token = self._peek()
        if token is None:
            raise ValidationError("Unexpected end of formula")
        if token.kind == "number":
            self._advance()
            return Number(Decimal(token.text))
        if token.kind == "name":
            self._advance()
            return Reference(tuple(token.text.split(".")))
        if self._accept("("):
            self._nest()
            node = self._expr()
            if self._accept(")") is None:
                raise ValidationError("Missing closing parenthesis")
            self.depth -= 1
            return node
        raise ValidationError(f"Unexpected {token.text!r} at position {token.pos}")


def parse_formula(formula: str) -> Optional[Node]:
    """Parse a formula into an expression tree.

    Returns None for a formula with no tokens.

    Raises:
        ValidationError: If the formula is not a valid arithmetic expression
    """
    tokens = tokenize(formula)
    if not tokens:
        return None
    return _Parser(tokens).parse()


def resolve_reference(context: Mapping[str, Any], parts: tuple[str, ...]) -> Any:
    """Resolve a (possibly dotted) reference against a variable context.

    Dotted references walk the context as nested mappings first. When that
    fails, the full dotted name is tried as a flat key, which is how
    transaction variables such as ``T.Moneda`` are stored.
    """
    if len(parts) == 1:
        return context.get(parts[0])

    current: Any = context
    for part in parts:
        if not isinstance(current, Mapping):
            current = None
            break
        current = current.get(part)
        if current is None:
            break
    if current is not None:
        return current
    return context.get(".".join(parts))


def _to_number(value: Any) -> Decimal:
    # bool is an int subclass but has no arithmetic meaning in a formula
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    return Decimal(0)


def _evaluate_node(node: Node, context: Mapping[str, Any]) -> Decimal:
    if isinstance(node, Number):
        return node.value
    if isinstance(node, Reference):
        return _to_number(resolve_reference(context, node.parts))
    if isinstance(node, UnaryOp):
        operand = _evaluate_node(node.operand, context)
        return -operand if node.op == "-" else operand

    left = _evaluate_node(node.left, context)
    right = _evaluate_node(node.right, context)
    if node.op == "+":
        return left + right
    if node.op == "-":
        return left - right
    if node.op == "*":
        return left * right
    return left / right


def evaluate(formula: Optional[str], context: Mapping[str, Any]) -> FormulaResult:
    """Evaluate a formula against a variable context.

    Args:
        formula: Formula text, or None
        context: Variable bag; values may be numbers, strings, None or
            nested mappings for dotted names

    Returns:
        A Decimal for arithmetic results, the string value itself when the
        whole formula is a single reference to a string variable, or None
        when the formula is empty or cannot be evaluated
    """
    if formula is None or not formula.strip():
        return None

    text = formula.strip()
    try:
        tokens = tokenize(text)
        tree = _Parser(tokens).parse() if tokens else None
    except ValidationError as e:
        logger.debug("Formula %r could not be parsed: %s", formula, e)
        return None
    if tree is None:
        return None

    # Only a formula that is exactly one name passes a string value through.
    if len(tokens) == 1 and tokens[0].kind == "name" and tokens[0].text == text:
        value = resolve_reference(context, tree.parts)
        if isinstance(value, str):
            return value

    try:
        result = _evaluate_node(tree, context)
    except (ArithmeticError, RecursionError) as e:
        logger.debug("Formula %r could not be evaluated: %s", formula, e)
        return None

    if not result.is_finite():
        return None
    return result


def formula_error(formula: Optional[str]) -> Optional[str]:
    """Return a parse error message for a formula, or None if it is valid."""
    if formula is None or not formula.strip():
        return None
    try:
        parse_formula(formula.strip())
    except ValidationError as e:
        return str(e)
    return None
