"""Formula AST node hierarchy with source location metadata.

Every node is immutable and exclusively owns its children, so a parsed
expression is always a tree.  Source locations are keyword-only and take no
part in equality: two trees compare equal when they have the same shape and
the same payloads, wherever they came from.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class FormulaMathOp(Enum):
    """Arithmetic operators."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MOD = "%"
    EXPONENT = "^"


class FormulaCompareOp(Enum):
    """Comparison operators."""
    EQUALS = "=="
    NOT_EQUALS = "!="
    LESS_THAN = "<"
    LESS_THAN_EQ = "<="
    GREATER_THAN = ">"
    GREATER_THAN_EQ = ">="


class FormulaBoolOp(Enum):
    """Boolean connectives."""
    AND = "and"
    OR = "or"


class FormulaUnaryOperator(Enum):
    """Prefix operators."""
    UADD = "+"
    USUB = "-"
    NOT = "not"


@dataclass(frozen=True)
class FormulaASTNode(ABC):
    """
    Abstract base class for all formula AST nodes.

    Source location fields are keyword-only so that nodes can be built
    positionally in tests and by hand.
    """
    line: int | None = field(default=None, kw_only=True, compare=False)
    column: int | None = field(default=None, kw_only=True, compare=False)

    @abstractmethod
    def describe(self) -> str:
        """Describe the node as a compact prefix expression."""


@dataclass(frozen=True)
class FormulaASTBinaryOp(FormulaASTNode):
    """Arithmetic or string concatenation: left op right."""
    left: FormulaASTNode
    op: FormulaMathOp
    right: FormulaASTNode

    def describe(self) -> str:
        return f"({self.op.value} {self.left.describe()} {self.right.describe()})"


@dataclass(frozen=True)
class FormulaASTComparison(FormulaASTNode):
    """Comparison of two values of the same kind."""
    left: FormulaASTNode
    op: FormulaCompareOp
    right: FormulaASTNode

    def describe(self) -> str:
        return f"({self.op.value} {self.left.describe()} {self.right.describe()})"


@dataclass(frozen=True)
class FormulaASTBooleanOp(FormulaASTNode):
    """'and' / 'or' over two booleans."""
    left: FormulaASTNode
    op: FormulaBoolOp
    right: FormulaASTNode

    def describe(self) -> str:
        return f"({self.op.value} {self.left.describe()} {self.right.describe()})"


@dataclass(frozen=True)
class FormulaASTUnaryOp(FormulaASTNode):
    """Prefix operator applied to one operand."""
    op: FormulaUnaryOperator
    operand: FormulaASTNode

    def describe(self) -> str:
        return f"({self.op.value} {self.operand.describe()})"


@dataclass(frozen=True)
class FormulaASTTernaryOp(FormulaASTNode):
    """test ? accept : reject"""
    test: FormulaASTNode
    accept: FormulaASTNode
    reject: FormulaASTNode

    def describe(self) -> str:
        return f"(? {self.test.describe()} {self.accept.describe()} {self.reject.describe()})"


@dataclass(frozen=True)
class FormulaASTCall(FormulaASTNode):
    """Function call; the callee is always an identifier."""
    callee: FormulaASTNode
    args: Tuple[FormulaASTNode, ...] = ()

    def describe(self) -> str:
        parts = [self.callee.describe()] + [arg.describe() for arg in self.args]
        return f"(call {' '.join(parts)})"


@dataclass(frozen=True)
class FormulaASTIdentifier(FormulaASTNode):
    """Name to be resolved by the evaluation context."""
    name: str

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True)
class FormulaASTString(FormulaASTNode):
    """String literal, kept verbatim including its quotes."""
    text: str

    def describe(self) -> str:
        return self.text


@dataclass(frozen=True)
class FormulaASTNumber(FormulaASTNode):
    """Number literal, kept as source text until evaluation."""
    text: str

    def describe(self) -> str:
        return self.text


@dataclass(frozen=True)
class FormulaASTBoolean(FormulaASTNode):
    """Boolean literal."""
    value: bool

    def describe(self) -> str:
        return "true" if self.value else "false"
