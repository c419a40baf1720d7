from collections.abc import Iterable

from graphql import DocumentNode, parse

from granate import log
from granate.annotations.directive import extract_directive_contexts, extract_directive_info, resolve_target_names
from granate.annotations.models import Annotation, AnnotationFactory


class AnnotationExtractor:
    """Extracts the annotations of a schema using a set of annotation factories.

    Directives whose tag has no registered factory are skipped, so a schema can
    carry directives meant for other tooling.
    """

    def __init__(self, factories: Iterable[AnnotationFactory] = ()) -> None:
        self._factories: dict[str, AnnotationFactory] = {}
        for factory in factories:
            self.register(factory)

    @property
    def tags(self) -> list[str]:
        return list(self._factories)

    def register(self, factory: AnnotationFactory) -> None:
        """Register a factory for its tag.

        Raises:
            ValueError: If a factory is already registered for the same tag.
        """
        if factory.tag in self._factories:
            raise ValueError(f"An annotation factory is already registered for tag: '{factory.tag}'")
        self._factories[factory.tag] = factory

    def parse(self, schema: str | DocumentNode) -> list[Annotation]:
        """
        Parse a schema and return the annotations produced by the registered factories.

        Args:
            schema: The GraphQL schema as SDL text or as a parsed document.

        Returns:
            list[Annotation]: The annotations, in document order.

        Raises:
            AnnotationError: If a directive argument cannot be converted or a factory rejects a directive.
        """
        document = parse(schema) if isinstance(schema, str) else schema
        annotations: list[Annotation] = []

        for context in extract_directive_contexts(document):
            tag = context.directive.name.value
            factory = self._factories.get(tag)
            if factory is None:
                log.debug(f"Skipping directive '@{tag}' without annotation factory")
                continue

            directive_info = extract_directive_info(context.directive)
            type_name, field_name = resolve_target_names(context)
            annotation = factory.build(directive_info, type_name, field_name)
            if not annotation:
                log.debug(f"Annotation factory '{tag}' produced nothing for {type_name}.{field_name}")
                continue

            log.debug(f"Extracted '@{tag}' annotation for {type_name}" + (f".{field_name}" if field_name else ""))
            annotations.append(annotation)

        log.info(f"Extracted {len(annotations)} annotation(s) from the schema.")
        return annotations
