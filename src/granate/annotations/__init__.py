from granate.annotations.extractor import AnnotationExtractor
from granate.annotations.mock import MOCK_TAG, MockAnnotation, MockAnnotationFactory, mock_annotation_factory
from granate.annotations.models import (
    Annotation,
    AnnotationFactory,
    DirectiveArgument,
    DirectiveContext,
    DirectiveInfo,
    Mocks,
)
from granate.annotations.rest import REST_TAG, RestAnnotation, RestAnnotationFactory, rest_annotation_factory

STANDARD_ANNOTATION_FACTORIES: list[AnnotationFactory] = [mock_annotation_factory, rest_annotation_factory]

__all__ = [
    "MOCK_TAG",
    "REST_TAG",
    "STANDARD_ANNOTATION_FACTORIES",
    "Annotation",
    "AnnotationExtractor",
    "AnnotationFactory",
    "DirectiveArgument",
    "DirectiveContext",
    "DirectiveInfo",
    "MockAnnotation",
    "MockAnnotationFactory",
    "Mocks",
    "RestAnnotation",
    "RestAnnotationFactory",
    "mock_annotation_factory",
    "rest_annotation_factory",
]
