import math
from collections import Counter
from dataclasses import dataclass, field


@dataclass
class TextMetrics:
    loc: int = 0
    sloc: int = 0
    comment_lines: int = 0
    blank_lines: int = 0
    comment_density: float = 0.0


@dataclass
class HalsteadCounters:
    """
    Operator and operand frequency tables for one file.

    Operators are keyed by node kind, operands by their exact source text.
    Every derived measure is computed from the two tables on demand.
    """

    operators: Counter = field(default_factory=Counter)
    operands: Counter = field(default_factory=Counter)

    @property
    def total_operators(self) -> int:
        return sum(self.operators.values())

    @property
    def total_operands(self) -> int:
        return sum(self.operands.values())

    @property
    def distinct_operators(self) -> int:
        return len(self.operators)

    @property
    def distinct_operands(self) -> int:
        return len(self.operands)

    @property
    def length(self) -> int:
        return self.total_operators + self.total_operands

    @property
    def vocabulary(self) -> int:
        return self.distinct_operators + self.distinct_operands

    @property
    def volume(self) -> float:
        return self.length * math.log2(max(1, self.vocabulary))

    @property
    def difficulty(self) -> float:
        return (self.distinct_operators / 2) * (self.total_operands / max(1, self.distinct_operands))

    @property
    def effort(self) -> float:
        return self.volume * self.difficulty


@dataclass
class ASTMetrics:
    cyclomatic_complexity: int = 1
    cognitive_complexity: int = 0
    nesting_depth: int = 0
    fan_out: int = 0
    halstead: HalsteadCounters = field(default_factory=HalsteadCounters)

    @classmethod
    def neutral(cls) -> "ASTMetrics":
        # Stand-in for files we have no grammar for: one path, nothing else.
        return cls()
