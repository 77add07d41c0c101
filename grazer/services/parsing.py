from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Protocol, Sequence

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Parser

from grazer.config import TSX_EXTENSIONS, TYPESCRIPT_EXTENSIONS
from grazer.errors import SourceParseError

# Load TypeScript and TSX grammars
TYPESCRIPT_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())


class SyntaxNode(Protocol):
    """
    The read-only view of a parsed node the analyzers rely on.

    `tree_sitter.Node` satisfies this structurally; anything else that exposes
    the same attributes can be analyzed too.
    """

    @property
    def type(self) -> str: ...

    @property
    def is_named(self) -> bool: ...

    @property
    def children(self) -> Sequence["SyntaxNode"]: ...

    @property
    def text(self) -> Optional[bytes]: ...

    @property
    def start_byte(self) -> int: ...

    @property
    def end_byte(self) -> int: ...

    def child_by_field_name(self, name: str) -> Optional["SyntaxNode"]: ...


class HalsteadRole(enum.Enum):
    OPERATOR = "operator"
    OPERAND = "operand"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class LanguageProfile:
    """
    Node kinds a grammar uses for every construct the metrics care about.

    Analyzers never hard-code grammar names; they ask the profile. Supporting
    another tree-sitter grammar means writing another profile.
    """

    name: str
    decision_kinds: FrozenSet[str]
    logical_operator_kinds: FrozenSet[str]
    block_kinds: FrozenSet[str]
    import_kinds: FrozenSet[str]
    operand_kinds: FrozenSet[str]
    keyword_kinds: FrozenSet[str]
    binary_kinds: FrozenSet[str]
    cognitive_kinds: FrozenSet[str]
    function_kinds: FrozenSet[str]
    comment_kinds: FrozenSet[str]

    def classify(self, node: SyntaxNode) -> HalsteadRole:
        """
        Assign a node to exactly one Halstead role.

        Every anonymous node is a lexical token (punctuation, keyword or
        operator) and therefore an operator. Named nodes are operands when they
        are identifiers or literals, operators when they are keyword leaves
        such as `this` or `true`, and neutral otherwise (containers,
        expressions whose operator token is a child of its own, comments).
        """
        if not node.is_named:
            return HalsteadRole.OPERATOR
        if node.type in self.operand_kinds:
            return HalsteadRole.OPERAND
        if node.type in self.keyword_kinds:
            return HalsteadRole.OPERATOR
        return HalsteadRole.NEUTRAL


TYPESCRIPT_PROFILE = LanguageProfile(
    name="typescript",
    decision_kinds=frozenset({
        'if_statement',
        'for_statement',
        'for_in_statement',  # for-in and for-of share this node
        'while_statement',
        'do_statement',
        'switch_case',
        'catch_clause',
        'ternary_expression',
    }),
    logical_operator_kinds=frozenset({'&&', '||'}),
    block_kinds=frozenset({'statement_block'}),
    import_kinds=frozenset({'import_statement'}),
    operand_kinds=frozenset({
        'identifier',
        'property_identifier',
        'shorthand_property_identifier',
        'shorthand_property_identifier_pattern',
        'private_property_identifier',
        'statement_identifier',
        'type_identifier',
        'jsx_identifier',
        'undefined',
        'string',
        'number',
    }),
    keyword_kinds=frozenset({'this', 'super', 'true', 'false', 'null', 'import'}),
    binary_kinds=frozenset({'binary_expression'}),
    cognitive_kinds=frozenset({
        'if_statement',
        'while_statement',
        'do_statement',
        'for_statement',
        'for_in_statement',
        'catch_clause',
        'switch_statement',
        'ternary_expression',
    }),
    function_kinds=frozenset({
        'function_declaration',
        'function_expression',
        'arrow_function',
        'method_definition',
        'generator_function',
        'generator_function_declaration',
    }),
    comment_kinds=frozenset({'comment', 'html_comment'}),
)


class SourceParser(Protocol):
    profile: LanguageProfile

    def parse(self, content: str, path: str = "<memory>") -> SyntaxNode: ...


class TreeSitterParser:
    def __init__(self, language: Language, profile: LanguageProfile):
        self.profile = profile
        self._parser = Parser(language)

    def parse(self, content: str, path: str = "<memory>") -> SyntaxNode:
        tree = self._parser.parse(content.encode("utf-8"))
        if tree is None or tree.root_node is None:
            raise SourceParseError(path, "parser produced no syntax tree")

        root = tree.root_node
        if root.has_error:
            raise SourceParseError(path, _describe_first_error(root))
        return root


def _describe_first_error(root) -> str:
    # Only follow subtrees that actually contain the error.
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            what = f"missing '{node.type}'" if node.is_missing else "syntax error"
            return f"{what} at line {node.start_point.row + 1}"
        stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
    return "syntax errors in source"


_default_parsers: Optional[Dict[str, SourceParser]] = None


def get_default_parsers() -> Dict[str, SourceParser]:
    """
    Extension -> parser mapping for every grammar we ship.

    Parsers are created once per process; the TSX parser also handles plain
    JavaScript so JSX in `.js` files parses.
    """
    global _default_parsers
    if _default_parsers is None:
        ts_parser = TreeSitterParser(TYPESCRIPT_LANGUAGE, TYPESCRIPT_PROFILE)
        tsx_parser = TreeSitterParser(TSX_LANGUAGE, TYPESCRIPT_PROFILE)
        parsers: Dict[str, SourceParser] = {ext: ts_parser for ext in TYPESCRIPT_EXTENSIONS}
        parsers.update({ext: tsx_parser for ext in TSX_EXTENSIONS})
        _default_parsers = parsers
    return _default_parsers


def parser_for_path(path: str, parsers: Optional[Dict[str, SourceParser]] = None) -> Optional[SourceParser]:
    registry = get_default_parsers() if parsers is None else parsers
    return registry.get(os.path.splitext(path)[1].lower())
