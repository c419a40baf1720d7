from dataclasses import dataclass
from typing import Any

from granate.annotations.models import DirectiveArgument
from granate.errors import AnnotationError


@dataclass(frozen=True)
class ArgumentDescriptor:
    """Expected shape of one directive argument.

    Attributes:
        type: Expected Python type or tuple of types, None accepts any value.
        required: Whether the argument must be present.
    """

    type: type | tuple[type, ...] | None = None
    required: bool = False


def _type_names(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " | ".join(t.__name__ for t in expected)
    return expected.__name__


def _matches(value: Any, expected: type | tuple[type, ...]) -> bool:
    expected_types = expected if isinstance(expected, tuple) else (expected,)
    # bool is an int subclass but a boolean literal never stands in for a number
    if isinstance(value, bool) and bool not in expected_types:
        return False
    return isinstance(value, expected_types)


def extract_arguments(
    tag: str, arguments: list[DirectiveArgument], descriptors: dict[str, ArgumentDescriptor]
) -> dict[str, Any]:
    """
    Validate directive arguments against their descriptors and return them by name.

    Only the declared arguments are returned, unknown arguments are ignored.

    Args:
        tag: Tag of the directive, used in error messages.
        arguments: The arguments of the directive occurrence.
        descriptors: Expected arguments by name.

    Returns:
        dict[str, Any]: The values of the declared arguments that are present.

    Raises:
        AnnotationError: If a required argument is missing or an argument has the wrong type.
    """
    arguments_by_name = {argument.name: argument for argument in arguments}
    extracted: dict[str, Any] = {}

    for name, descriptor in descriptors.items():
        argument = arguments_by_name.get(name)
        if argument is None:
            if descriptor.required:
                raise AnnotationError(f"Missing required argument: '{name}' in '{tag}' annotation.")
            continue

        if descriptor.type is not None and not _matches(argument.value, descriptor.type):
            raise AnnotationError(
                f"Argument: '{name}' in '{tag}' annotation should be of type: '{_type_names(descriptor.type)}' "
                f"but is of type: '{type(argument.value).__name__}'."
            )

        extracted[name] = argument.value

    return extracted


def require_type_name(tag: str, type_name: str | None) -> str:
    if not type_name:
        raise AnnotationError(f"Type name is required in '{tag}' annotation.")
    return type_name
