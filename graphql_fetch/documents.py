"""
Operation documents.

Parsing and printing are delegated to graphql-core. This module only adds a
typed wrapper around ``DocumentNode`` and the structural checks the client
factory relies on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Set, Tuple, Type, TypeVar, Union

from graphql import (
    DocumentNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    OperationDefinitionNode,
    Visitor,
    parse,
    print_ast,
    visit,
)

TResult = TypeVar("TResult")
TVariables = TypeVar("TVariables")

DOCUMENT_SUFFIX = "Document"


@dataclass(frozen=True)
class TypedDocument(Generic[TResult, TVariables]):
    """
    A parsed document tagged with its result and variables types.

    Python cannot compute the client's per-operation signatures from the
    source mapping, so the types are carried at runtime (usually as
    ``TypedDict`` classes) and through the generic parameters for static
    checkers that follow them.

    The wrapper exposes ``kind`` and ``definitions`` like the wrapped
    ``DocumentNode`` so both pass the same structural check.
    """

    document: DocumentNode
    result_type: Optional[Type[TResult]] = None
    variables_type: Optional[Type[TVariables]] = None

    @property
    def kind(self) -> str:
        return self.document.kind

    @property
    def definitions(self) -> Tuple[Any, ...]:
        return tuple(self.document.definitions)

    def __str__(self) -> str:
        return print_ast(self.document)


Document = Union[DocumentNode, TypedDocument[Any, Any]]


def is_document(value: Any) -> bool:
    """Check whether a value is a parsed GraphQL document (structural tag check)."""
    if isinstance(value, type):
        return False
    return getattr(value, "kind", None) == DocumentNode.kind


def as_document_node(document: Document) -> DocumentNode:
    if isinstance(document, TypedDocument):
        return document.document
    return document


def get_operation_definitions(document: Any) -> List[OperationDefinitionNode]:
    """Return the operation definitions of a document, ignoring fragments."""
    return [
        definition
        for definition in getattr(document, "definitions", None) or ()
        if getattr(definition, "kind", None) == OperationDefinitionNode.kind
    ]


def document_source(query: Union[str, Document]) -> str:
    """Get the textual form of a query, printing it if it is not already text."""
    if isinstance(query, str):
        return query
    return print_ast(as_document_node(query))


def parse_document(
    source: str,
    result_type: Optional[Type[TResult]] = None,
    variables_type: Optional[Type[TVariables]] = None,
) -> TypedDocument[TResult, TVariables]:
    """
    Parse GraphQL source into a :class:`TypedDocument`.

    Args:
        source: GraphQL document text
        result_type: Type describing the ``data`` of a successful result
        variables_type: Type describing the operation variables

    Raises:
        graphql.GraphQLError: If the source does not parse
    """
    return TypedDocument(parse(source), result_type, variables_type)


class _FragmentSpreadCollector(Visitor):
    def __init__(self) -> None:
        super().__init__()
        self.names: Set[str] = set()

    def enter_fragment_spread(self, node: FragmentSpreadNode, *_args: Any) -> None:
        self.names.add(node.name.value)


def _fragment_spreads(node: Any) -> Set[str]:
    collector = _FragmentSpreadCollector()
    visit(node, collector)
    return collector.names


def documents_from_source(source: str) -> Dict[str, DocumentNode]:
    """
    Split GraphQL source into one document per named operation.

    Keys follow the ``<OperationName>Document`` convention so the result can
    be passed straight to :func:`~graphql_fetch.client.GraphQLClient`. Each
    document carries the fragments its operation uses, transitively.
    Anonymous operations are skipped.

    Args:
        source: GraphQL text holding any number of operations and fragments

    Returns:
        Mapping of ``<OperationName>Document`` to a single-operation document
    """
    parsed = parse(source)
    fragments = {
        definition.name.value: definition
        for definition in parsed.definitions
        if isinstance(definition, FragmentDefinitionNode)
    }

    documents: Dict[str, DocumentNode] = {}
    for operation in get_operation_definitions(parsed):
        if operation.name is None:
            continue

        used: List[FragmentDefinitionNode] = []
        seen: Set[str] = set()
        pending = sorted(_fragment_spreads(operation))
        while pending:
            name = pending.pop(0)
            if name in seen or name not in fragments:
                continue
            seen.add(name)
            used.append(fragments[name])
            pending.extend(sorted(_fragment_spreads(fragments[name]) - seen))

        documents[f"{operation.name.value}{DOCUMENT_SUFFIX}"] = DocumentNode(
            definitions=(operation, *used)
        )

    return documents
