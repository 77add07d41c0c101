"""
Cognitive complexity, after the SonarSource whitepaper
(https://www.sonarsource.com/docs/CognitiveComplexity.pdf).

Runs as its own pass: nesting here means control-flow nesting, not
statement-block depth, and the two never share a counter.
"""

from typing import Optional

from grazer.services.parsing import LanguageProfile, SyntaxNode


def _operator(node: SyntaxNode) -> Optional[str]:
    operator = node.child_by_field_name('operator')
    return operator.type if operator is not None else None


def _is_sequence_continuation(node: SyntaxNode, operator: str, profile: LanguageProfile) -> bool:
    # `a && b && c` parses as `(a && b) && c`: only the innermost link scores.
    left = node.child_by_field_name('left')
    return left is not None and left.type in profile.binary_kinds and _operator(left) == operator


def analyze_cognitive_complexity(root: SyntaxNode, profile: LanguageProfile) -> int:
    complexity = 0

    stack: list[tuple[SyntaxNode, int]] = [(root, 0)]
    while stack:
        node, nesting = stack.pop()
        next_nesting = nesting
        kind = node.type

        if node.is_named:
            if kind in profile.cognitive_kinds:
                complexity += 1 + nesting
                next_nesting = nesting + 1
            elif kind in profile.binary_kinds:
                operator = _operator(node)
                if operator in profile.logical_operator_kinds and not _is_sequence_continuation(node, operator, profile):
                    complexity += 1
            elif kind in profile.function_kinds:
                # Function, closure and method bodies nest without scoring.
                next_nesting = nesting + 1

        for child in reversed(node.children):
            stack.append((child, next_nesting))

    return complexity
