from granate.annotations.rest.annotation import (
    REST_TAG,
    RequestDefaults,
    RestAnnotation,
    RestAnnotationFactory,
    rest_annotation_factory,
)
from granate.annotations.rest.loader import CoalescingLoader
from granate.annotations.rest.request import RequestDescriptor, serialize_request_key

__all__ = [
    "REST_TAG",
    "CoalescingLoader",
    "RequestDefaults",
    "RequestDescriptor",
    "RestAnnotation",
    "RestAnnotationFactory",
    "rest_annotation_factory",
    "serialize_request_key",
]
