from grazer.services.analysis_types import ASTMetrics, HalsteadCounters
from grazer.services.parsing import HalsteadRole, LanguageProfile, SyntaxNode


def _node_text(node: SyntaxNode) -> str:
    text = node.text
    return text.decode('utf-8', errors='replace') if text is not None else ""


def analyze_structure(root: SyntaxNode, profile: LanguageProfile) -> ASTMetrics:
    """
    Walk the whole tree once, collecting everything except cognitive
    complexity.

    - cyclomatic complexity: 1 + one per decision node or `&&`/`||` token,
      regardless of nesting.
    - nesting depth: deepest statement block reached; the statements of a
      block sit one level deeper than the block itself. Its braces and
      comments do not count, so an empty block adds no depth.
    - fan-out: one per static import statement.
    - Halstead tables: every node classified by the profile. Operand nodes are
      terminal, so the quote tokens inside a string literal are not counted
      again as operators.
    """
    cyclomatic_complexity = 1
    max_depth = 0
    fan_out = 0
    halstead = HalsteadCounters()

    # Explicit stack: long operator chains nest far deeper than the default
    # recursion limit.
    stack: list[tuple[SyntaxNode, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        kind = node.type
        # Braces and comments of a block do not make it deeper.
        if node.is_named and kind not in profile.comment_kinds:
            max_depth = max(max_depth, depth)

        if kind in profile.decision_kinds or kind in profile.logical_operator_kinds:
            cyclomatic_complexity += 1
        elif kind in profile.import_kinds:
            fan_out += 1

        role = profile.classify(node)
        if role is HalsteadRole.OPERATOR:
            halstead.operators[kind] += 1
        elif role is HalsteadRole.OPERAND:
            halstead.operands[_node_text(node)] += 1
            continue

        child_depth = depth + 1 if kind in profile.block_kinds else depth
        for child in reversed(node.children):
            stack.append((child, child_depth))

    return ASTMetrics(
        cyclomatic_complexity=cyclomatic_complexity,
        cognitive_complexity=0,
        nesting_depth=max_depth,
        fan_out=fan_out,
        halstead=halstead,
    )
