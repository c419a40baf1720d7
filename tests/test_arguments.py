import re

import pytest

from granate.annotations.arguments import ArgumentDescriptor, extract_arguments, require_type_name
from granate.annotations.models import DirectiveArgument
from granate.errors import AnnotationError

DESCRIPTORS = {
    "value": ArgumentDescriptor(str, required=True),
    "count": ArgumentDescriptor(int),
    "args": ArgumentDescriptor((str, list)),
    "anything": ArgumentDescriptor(),
}


def test_extract_arguments_returns_declared_arguments_only() -> None:
    arguments = [
        DirectiveArgument("value", "country"),
        DirectiveArgument("count", 3),
        DirectiveArgument("unknown", "ignored"),
    ]

    assert extract_arguments("mock", arguments, DESCRIPTORS) == {"value": "country", "count": 3}


def test_extract_arguments_missing_required() -> None:
    with pytest.raises(AnnotationError, match="Missing required argument: 'value' in 'mock' annotation"):
        extract_arguments("mock", [DirectiveArgument("count", 3)], DESCRIPTORS)


@pytest.mark.parametrize(
    ("argument", "message"),
    [
        (DirectiveArgument("value", 42), "should be of type: 'str' but is of type: 'int'"),
        (DirectiveArgument("count", "3"), "should be of type: 'int' but is of type: 'str'"),
        (DirectiveArgument("count", True), "should be of type: 'int' but is of type: 'bool'"),
        (DirectiveArgument("args", 1.5), re.escape("should be of type: 'str | list' but is of type: 'float'")),
    ],
)
def test_extract_arguments_wrong_type(argument: DirectiveArgument, message: str) -> None:
    arguments = [argument] if argument.name == "value" else [DirectiveArgument("value", "x"), argument]

    with pytest.raises(AnnotationError, match=message):
        extract_arguments("mock", arguments, DESCRIPTORS)


@pytest.mark.parametrize("value", ["text", 1, 2.5, False, ["a"]])
def test_extract_arguments_any_type(value: object) -> None:
    arguments = [DirectiveArgument("value", "x"), DirectiveArgument("anything", value)]

    assert extract_arguments("mock", arguments, DESCRIPTORS)["anything"] == value


def test_extract_arguments_tuple_of_types() -> None:
    arguments = [DirectiveArgument("value", "x"), DirectiveArgument("args", ["a", "b"])]

    assert extract_arguments("mock", arguments, DESCRIPTORS)["args"] == ["a", "b"]


@pytest.mark.parametrize("type_name", [None, ""])
def test_require_type_name(type_name: str | None) -> None:
    with pytest.raises(AnnotationError, match="Type name is required in 'rest' annotation"):
        require_type_name("rest", type_name)
