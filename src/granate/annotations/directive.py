from typing import Any

from graphql import (
    BooleanValueNode,
    DirectiveNode,
    DocumentNode,
    EnumValueDefinitionNode,
    FieldDefinitionNode,
    FloatValueNode,
    InputValueDefinitionNode,
    IntValueNode,
    ListValueNode,
    Node,
    StringValueNode,
    TypeDefinitionNode,
    TypeExtensionNode,
    ValueNode,
    Visitor,
    visit,
)

from granate.annotations.models import ArgumentValue, DirectiveArgument, DirectiveContext, DirectiveInfo
from granate.errors import AnnotationError

TYPE_NODES = (TypeDefinitionNode, TypeExtensionNode)
MEMBER_NODES = (FieldDefinitionNode, InputValueDefinitionNode, EnumValueDefinitionNode)


class DirectiveContextCollector(Visitor):
    """Collects one DirectiveContext per directive found while visiting a document."""

    def __init__(self) -> None:
        super().__init__()
        self.contexts: list[DirectiveContext] = []

    def enter(self, node: Node, key: Any, parent: Any, path: Any, ancestors: list[Any]) -> None:
        directives = getattr(node, "directives", None)
        if not directives:
            return

        # the path to the node holds node tuples too (e.g. a type's fields), keep the nodes only
        path_to_node = [*ancestors, parent]
        ancestor_nodes = [ancestor for ancestor in reversed(path_to_node) if isinstance(ancestor, Node)]
        for directive in directives:
            self.contexts.append(DirectiveContext(directive=directive, target=node, ancestors=ancestor_nodes))


def extract_directive_contexts(document: DocumentNode) -> list[DirectiveContext]:
    """Walk a schema document and return its directives in document order.

    Args:
        document: The parsed schema document. It is not modified.

    Returns:
        list[DirectiveContext]: One entry per directive occurrence, outer nodes before inner ones.
    """
    collector = DirectiveContextCollector()
    visit(document, collector)
    return collector.contexts


def convert_value(value_node: ValueNode) -> ArgumentValue:
    """Convert a directive argument literal into its Python value.

    Raises:
        AnnotationError: If the literal kind is not supported (enums, null, objects, variables).
    """
    if isinstance(value_node, (StringValueNode, BooleanValueNode)):
        return value_node.value
    if isinstance(value_node, IntValueNode):
        return int(value_node.value)
    if isinstance(value_node, FloatValueNode):
        return float(value_node.value)
    if isinstance(value_node, ListValueNode):
        return [convert_value(item) for item in value_node.values]

    raise AnnotationError(f"Conversion for values of type: '{type(value_node).__name__}' not supported.")


def extract_directive_info(directive: DirectiveNode) -> DirectiveInfo:
    return DirectiveInfo(
        tag=directive.name.value,
        arguments=[
            DirectiveArgument(name=argument.name.value, value=convert_value(argument.value))
            for argument in directive.arguments
        ],
    )


def resolve_target_names(context: DirectiveContext) -> tuple[str | None, str | None]:
    """Return the type name and field name a directive applies to.

    Types and type extensions give ``(type name, None)``. Fields, input fields and
    enum values give the name of their enclosing type and their own name. Any other
    location (field arguments, the schema definition, directive definitions) gives
    ``(None, None)``.
    """
    target = context.target
    if isinstance(target, TYPE_NODES):
        return target.name.value, None

    if isinstance(target, MEMBER_NODES) and context.ancestors:
        enclosing = context.ancestors[0]
        if isinstance(enclosing, TYPE_NODES):
            return enclosing.name.value, target.name.value

    return None, None
