"""
The ``@mock`` annotation: mock data for types and fields.

The ``value`` argument names a Faker generator, called with the optional ``args``
(a JSON array string or a list literal)::

    type Query {
        country: String @mock(value: "country")
        birthday: String @mock(value: "date", args: ["%d.%m.%y"])
        status: String @mock(value: "status", args: ["active", "inactive"])
    }

A ``value`` that names no Faker generator is used as a literal, or, when ``args``
are given, one of the ``args`` is picked at random.
"""

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from faker import Faker
from graphql import GraphQLSchema

from granate import log
from granate.annotations.arguments import ArgumentDescriptor, extract_arguments, require_type_name
from granate.annotations.models import DirectiveInfo, Mocks
from granate.context import OperationContext
from granate.errors import AnnotationError, MockCollisionError

MOCK_TAG = "mock"

# Faker attributes that reseed the generator instead of producing data
NON_GENERATOR_NAMES = frozenset({"seed", "seed_instance", "seed_locale"})


def parse_mock_args(args: str | list[Any] | None) -> list[Any]:
    if args is None:
        return []
    if isinstance(args, str):
        if not args.strip():
            return []
        try:
            args = json.loads(args)
        except json.JSONDecodeError as e:
            raise AnnotationError(f"Arguments of '{MOCK_TAG}' annotation are not valid JSON: {e}") from e
    if not isinstance(args, list):
        raise AnnotationError(f"Arguments must be a JSON array but is of type: '{type(args).__name__}'.")
    return args


def generate_value(faker: Faker, value: str, args: list[Any]) -> Any:
    """Produce a mock value from the Faker generator named ``value``."""
    is_literal = value.startswith("_") or value in NON_GENERATOR_NAMES
    generator = None if is_literal else getattr(faker, value, None)
    if callable(generator):
        return generator(*args)
    if generator is not None:
        return generator
    if args:
        return faker.random_element(args)
    return value


class TypeMockBuilder:
    """Mock factory of an object type composed from field generators.

    Calling the builder returns the value of the ``base`` mock (when it is a mapping)
    merged with one freshly generated value per field.
    """

    def __init__(self, type_name: str, base: Callable[[], Any] | None = None) -> None:
        self.type_name = type_name
        self._base = base
        self._fields: dict[str, Callable[[], Any]] = {}

    @property
    def field_names(self) -> list[str]:
        return list(self._fields)

    def add_field(self, field_name: str, generator: Callable[[], Any]) -> None:
        """
        Add the generator of a field.

        Raises:
            MockCollisionError: If the field is already mocked, by this builder or by its base mock.
        """
        if field_name in self._fields or field_name in self._base_value():
            raise MockCollisionError(f"Mock for field: '{field_name}' of type: '{self.type_name}' already exists.")
        self._fields[field_name] = generator

    def _base_value(self) -> dict[str, Any]:
        if self._base is None:
            return {}
        value = self._base()
        return dict(value) if isinstance(value, Mapping) else {}

    def __call__(self) -> dict[str, Any]:
        value = self._base_value()
        value.update({field_name: generator() for field_name, generator in self._fields.items()})
        return value


@dataclass
class MockAnnotation:
    value: str
    type_name: str
    field_name: str | None = None
    args: list[Any] = field(default_factory=list)

    def apply(
        self, schema: GraphQLSchema, mocks: Mocks, root_value: dict[str, Any], context: OperationContext
    ) -> None:
        faker = context.faker

        def generate() -> Any:
            return generate_value(faker, self.value, self.args)

        if self.field_name is None:
            mocks[self.type_name] = generate
            log.debug(f"Mocking type {self.type_name} with '{self.value}'")
            return

        builder = mocks.get(self.type_name)
        if not isinstance(builder, TypeMockBuilder):
            builder = TypeMockBuilder(self.type_name, builder)
        builder.add_field(self.field_name, generate)
        mocks[self.type_name] = builder
        log.debug(f"Mocking field {self.type_name}.{self.field_name} with '{self.value}'")


class MockAnnotationFactory:
    tag = MOCK_TAG

    argument_descriptors = {
        "value": ArgumentDescriptor(str, required=True),
        "args": ArgumentDescriptor((str, list)),
    }

    def build(
        self, directive_info: DirectiveInfo, type_name: str | None, field_name: str | None = None
    ) -> MockAnnotation:
        type_name = require_type_name(self.tag, type_name)
        arguments = extract_arguments(self.tag, directive_info.arguments, self.argument_descriptors)

        return MockAnnotation(
            value=arguments["value"],
            type_name=type_name,
            field_name=field_name,
            args=parse_mock_args(arguments.get("args")),
        )


mock_annotation_factory = MockAnnotationFactory()
