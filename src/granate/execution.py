import asyncio
from collections.abc import Iterable
from typing import Any

from graphql import DocumentNode, ExecutionResult, GraphQLSchema, build_ast_schema, graphql, parse

from granate import log
from granate.annotations import STANDARD_ANNOTATION_FACTORIES, AnnotationExtractor, AnnotationFactory, Mocks
from granate.config import GranateConfig
from granate.context import OperationContext
from granate.mocking import add_mock_functions_to_schema


def parse_schema(schema: str | DocumentNode) -> DocumentNode:
    if isinstance(schema, DocumentNode):
        return schema
    if not isinstance(schema, str) or not schema.strip():
        raise ValueError("Schema must be a non-empty string.")
    return parse(schema)


def build_schema_and_context(
    schema: str | DocumentNode,
    *,
    root_value: dict[str, Any] | None = None,
    context_values: dict[str, Any] | None = None,
    mocks: Mocks | None = None,
    annotation_factories: Iterable[AnnotationFactory] | None = None,
    config: GranateConfig | None = None,
) -> tuple[GraphQLSchema, dict[str, Any], OperationContext]:
    """
    Build an executable, mocked schema with its annotations applied.

    Every call creates a new operation context, so request defaults and cached
    REST responses are never shared between two builds.

    Args:
        schema: The GraphQL schema as SDL text or as a parsed document.
        root_value: Root field values and resolvers, called as ``fn(info, **args)``.
        context_values: Values made available to resolvers as ``info.context.values``.
        mocks: Mock factories keyed by type name.
        annotation_factories: Factories of the recognised annotations, the standard ones by default.
        config: Settings of the operation.

    Returns:
        tuple: The schema, the root value and the operation context to execute with.

    Raises:
        ValueError: If the schema is empty.
        GraphQLError: If the schema cannot be parsed or built.
        AnnotationError: If an annotation is misconfigured.
    """
    document = parse_schema(schema)
    # annotation tags are open ended, so undeclared directives must not fail the build
    graphql_schema = build_ast_schema(document, assume_valid_sdl=True)
    log.info("Successfully built the given GraphQL schema.")

    factories = STANDARD_ANNOTATION_FACTORIES if annotation_factories is None else annotation_factories
    annotations = AnnotationExtractor(factories).parse(document)

    context = OperationContext(config=config or GranateConfig(), values=dict(context_values or {}))
    operation_root_value = dict(root_value or {})
    operation_mocks = dict(mocks or {})

    for annotation in annotations:
        annotation.apply(graphql_schema, operation_mocks, operation_root_value, context)

    add_mock_functions_to_schema(graphql_schema, operation_mocks, context.faker, context.config.list_length)

    return graphql_schema, operation_root_value, context


async def granate(
    schema: str | DocumentNode,
    query: str,
    variable_values: dict[str, Any] | None = None,
    *,
    operation_name: str | None = None,
    root_value: dict[str, Any] | None = None,
    context_values: dict[str, Any] | None = None,
    mocks: Mocks | None = None,
    annotation_factories: Iterable[AnnotationFactory] | None = None,
    config: GranateConfig | None = None,
) -> ExecutionResult:
    """
    Execute a query against an annotated schema.

    Fields without a resolver are mocked. The HTTP session opened by REST fields
    is closed once the execution completes.

    Raises:
        ValueError: If the schema or the query is empty.
    """
    if not isinstance(query, str) or not query.strip():
        raise ValueError("Query must be a non empty string.")

    graphql_schema, operation_root_value, context = build_schema_and_context(
        schema,
        root_value=root_value,
        context_values=context_values,
        mocks=mocks,
        annotation_factories=annotation_factories,
        config=config,
    )

    try:
        result = await graphql(
            graphql_schema,
            query,
            root_value=operation_root_value,
            context_value=context,
            variable_values=variable_values,
            operation_name=operation_name,
        )
    finally:
        await context.aclose()

    if result.errors:
        log.warning(f"Query executed with {len(result.errors)} error(s).")
    return result


def granate_sync(
    schema: str | DocumentNode, query: str, variable_values: dict[str, Any] | None = None, **kwargs: Any
) -> ExecutionResult:
    """Run :func:`granate` in a new event loop."""
    return asyncio.run(granate(schema, query, variable_values, **kwargs))
