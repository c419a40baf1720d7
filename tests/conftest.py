from collections.abc import Iterator
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from faker import Faker
from graphql import GraphQLSchema, build_schema

from granate.annotations import DirectiveInfo, Mocks
from granate.config import GranateConfig
from granate.context import OperationContext

QUERY_SCHEMA_STR = """
type Query {
    foo: [String]
    bar: [String]
}

type Mutation {
    baz: String
}
"""


@dataclass
class RecordedAnnotation:
    """Annotation that only remembers what it was built from."""

    type_name: str | None
    field_name: str | None
    directive_info: DirectiveInfo

    def apply(self, schema: GraphQLSchema, mocks: Mocks, root_value: dict[str, Any], context: OperationContext) -> None:
        pass


class RecordingFactory:
    def __init__(self, tag: str, empty_result: bool = False) -> None:
        self.tag = tag
        self.empty_result = empty_result

    def build(
        self, directive_info: DirectiveInfo, type_name: str | None, field_name: str | None = None
    ) -> RecordedAnnotation | None:
        if self.empty_result:
            return None
        return RecordedAnnotation(type_name, field_name, directive_info)


def resolve_info(context: OperationContext) -> Any:
    """Minimal stand-in for GraphQLResolveInfo when calling resolvers directly."""
    return SimpleNamespace(context=context)


@pytest.fixture
def query_schema() -> GraphQLSchema:
    return build_schema(QUERY_SCHEMA_STR)


@pytest.fixture
def context() -> OperationContext:
    return OperationContext(config=GranateConfig(seed=42))


@pytest.fixture
def make_request_stub() -> Iterator[AsyncMock]:
    """Replace the REST transport with a stub answering 'bar'."""
    with patch("granate.annotations.rest.annotation.make_request", new=AsyncMock(return_value="bar")) as stub:
        yield stub


@pytest.fixture
def faker() -> Faker:
    faker = Faker()
    faker.seed_instance(0)
    return faker
