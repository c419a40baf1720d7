from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

from graphql import DirectiveNode, GraphQLSchema, Node

if TYPE_CHECKING:
    from granate.context import OperationContext

ArgumentValue: TypeAlias = str | bool | int | float | list["ArgumentValue"]
Mocks: TypeAlias = dict[str, Callable[[], Any]]


@dataclass(frozen=True)
class DirectiveArgument:
    name: str
    value: ArgumentValue


@dataclass(frozen=True)
class DirectiveInfo:
    tag: str
    arguments: list[DirectiveArgument] = field(default_factory=list)


@dataclass
class DirectiveContext:
    """A directive found in a schema document together with where it was found.

    Attributes:
        directive: The directive node.
        target: The node the directive is attached to.
        ancestors: The AST nodes leading to the document root, nearest first.
    """

    directive: DirectiveNode
    target: Node
    ancestors: list[Node] = field(default_factory=list)


class Annotation(Protocol):
    """Runtime behavior produced from one directive occurrence."""

    def apply(
        self,
        schema: GraphQLSchema,
        mocks: Mocks,
        root_value: dict[str, Any],
        context: "OperationContext",
    ) -> None: ...


class AnnotationFactory(Protocol):
    """Turns the directives tagged with ``tag`` into annotations.

    ``build`` may return None to produce no annotation for an occurrence.
    """

    tag: str

    def build(
        self, directive_info: DirectiveInfo, type_name: str | None, field_name: str | None = None
    ) -> Annotation | None: ...
