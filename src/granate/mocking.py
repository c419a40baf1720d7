from collections.abc import Callable, Mapping
from typing import Any

from faker import Faker
from graphql import (
    GraphQLAbstractType,
    GraphQLEnumType,
    GraphQLField,
    GraphQLFieldResolver,
    GraphQLInterfaceType,
    GraphQLObjectType,
    GraphQLOutputType,
    GraphQLResolveInfo,
    GraphQLScalarType,
    GraphQLSchema,
    GraphQLUnionType,
    is_abstract_type,
    is_list_type,
    is_non_null_type,
    is_object_type,
)

from granate import log

DEFAULT_STRING = "Hello World"


def is_introspection_type(type_name: str) -> bool:
    return type_name.startswith("__")


class SchemaMocker:
    """Produces mock values for the output types of a schema.

    Values come from ``mocks`` (zero argument factories keyed by type name) and fall
    back to random values of the built-in scalars, enum values and empty objects.
    """

    def __init__(
        self, schema: GraphQLSchema, mocks: Mapping[str, Callable[[], Any]], faker: Faker, list_length: int = 2
    ) -> None:
        self.schema = schema
        self.mocks = mocks
        self.faker = faker
        self.list_length = list_length
        self._default_scalars: dict[str, Callable[[], Any]] = {
            "String": lambda: DEFAULT_STRING,
            "Int": lambda: faker.pyint(min_value=-100, max_value=100),
            "Float": lambda: faker.pyfloat(min_value=-100, max_value=100),
            "Boolean": faker.pybool,
            "ID": lambda: str(faker.uuid4()),
        }

    def mock_type(self, type_: GraphQLOutputType) -> Any:
        if is_non_null_type(type_):
            return self.mock_type(type_.of_type)  # type: ignore[union-attr]
        if is_list_type(type_):
            return [self.mock_type(type_.of_type) for _ in range(self.list_length)]  # type: ignore[union-attr]

        named_type: Any = type_
        mock = self.mocks.get(named_type.name)

        if is_object_type(named_type):
            return self._mock_mapping(mock)
        if is_abstract_type(named_type):
            value = self._mock_mapping(mock)
            type_name = value.get("__typename") or self._first_possible_type_name(named_type)
            return {**self._mock_mapping(self.mocks.get(type_name)), **value, "__typename": type_name}

        if mock is not None:
            return mock()
        if isinstance(named_type, GraphQLEnumType):
            return self.faker.random_element(list(named_type.values))
        if isinstance(named_type, GraphQLScalarType):
            return self._default_scalars.get(named_type.name, lambda: DEFAULT_STRING)()

        raise TypeError(f"Cannot mock type: '{named_type}'")

    @staticmethod
    def _mock_mapping(mock: Callable[[], Any] | None) -> dict[str, Any]:
        if mock is None:
            return {}
        value = mock()
        return dict(value) if isinstance(value, Mapping) else {}

    def field_resolver(
        self, parent_type: GraphQLObjectType, field_name: str, field: GraphQLField
    ) -> GraphQLFieldResolver:
        """
        Create the resolver of a field.

        The resolver returns, in order of precedence: the value of the field in the source
        object (callables of the root value are called as ``fn(info, **args)``, other callables
        without arguments), the field value in the mock of the root type, a mock of the field type.
        """

        def resolve(source: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
            is_root = source is info.root_value
            if isinstance(source, Mapping) and field_name in source:
                value = source[field_name]
                if callable(value):
                    return value(info, **args) if is_root else value()
                return value

            if is_root:
                root_mock = self._mock_mapping(self.mocks.get(parent_type.name))
                if field_name in root_mock:
                    value = root_mock[field_name]
                    return value() if callable(value) else value

            return self.mock_type(field.type)

        return resolve

    def resolve_type(self, value: Any, info: GraphQLResolveInfo, abstract_type: GraphQLAbstractType) -> str:
        if isinstance(value, Mapping) and "__typename" in value:
            return str(value["__typename"])
        return self._first_possible_type_name(abstract_type)

    def _first_possible_type_name(self, abstract_type: GraphQLAbstractType) -> str:
        possible_types = self.schema.get_possible_types(abstract_type)
        if not possible_types:
            raise TypeError(f"Cannot mock type: '{abstract_type}' without possible types")
        return possible_types[0].name


def add_mock_functions_to_schema(
    schema: GraphQLSchema,
    mocks: Mapping[str, Callable[[], Any]],
    faker: Faker,
    list_length: int = 2,
    preserve_resolvers: bool = False,
) -> GraphQLSchema:
    """
    Install mocking resolvers on every object field of a schema.

    The schema is modified in place.

    Args:
        schema: The executable schema.
        mocks: Mock factories keyed by type name.
        faker: Source of the default random values.
        list_length: Number of items of mocked lists.
        preserve_resolvers: Keep the resolvers already set on fields.

    Returns:
        GraphQLSchema: The given schema.
    """
    mocker = SchemaMocker(schema, mocks, faker, list_length)
    mocked_fields = 0

    for type_name, type_ in schema.type_map.items():
        if is_introspection_type(type_name):
            continue

        if isinstance(type_, GraphQLObjectType):
            for field_name, field in type_.fields.items():
                if preserve_resolvers and field.resolve is not None:
                    continue
                field.resolve = mocker.field_resolver(type_, field_name, field)
                mocked_fields += 1
        elif isinstance(type_, (GraphQLInterfaceType, GraphQLUnionType)):
            if preserve_resolvers and type_.resolve_type is not None:
                continue
            type_.resolve_type = mocker.resolve_type

    log.debug(f"Installed mock resolvers on {mocked_fields} field(s)")
    return schema
