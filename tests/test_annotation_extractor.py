import pytest
from graphql import parse

from granate.annotations import AnnotationExtractor, DirectiveArgument, DirectiveInfo
from granate.errors import AnnotationError
from tests.conftest import RecordedAnnotation, RecordingFactory


@pytest.fixture
def extractor() -> AnnotationExtractor:
    return AnnotationExtractor([RecordingFactory("bar"), RecordingFactory("baz"), RecordingFactory("bam", True)])


def test_parse_without_annotations(extractor: AnnotationExtractor) -> None:
    assert extractor.parse("type Query { foo: String }") == []


def test_parse_skips_unregistered_tags(extractor: AnnotationExtractor) -> None:
    assert extractor.parse("type Query { foo: String @foo @other(value: ENUM) }") == []


def test_parse_field_annotation_with_arguments(extractor: AnnotationExtractor) -> None:
    schema = """
        type Query {
            foo: String @bar( string: "hello world!", int: 42, float: 32.5, boolean: true, list: ["a", 1] )
        }
    """

    assert extractor.parse(schema) == [
        RecordedAnnotation(
            "Query",
            "foo",
            DirectiveInfo(
                tag="bar",
                arguments=[
                    DirectiveArgument("string", "hello world!"),
                    DirectiveArgument("int", 42),
                    DirectiveArgument("float", 32.5),
                    DirectiveArgument("boolean", True),
                    DirectiveArgument("list", ["a", 1]),
                ],
            ),
        )
    ]


def test_parse_type_annotation(extractor: AnnotationExtractor) -> None:
    assert extractor.parse("type Query @bar { foo: String }") == [
        RecordedAnnotation("Query", None, DirectiveInfo(tag="bar"))
    ]


def test_parse_field_with_arguments_and_several_annotations(extractor: AnnotationExtractor) -> None:
    schema = """
        type Query {
            foo(id: Int): String
            @bar( foo: "baz" )
            @baz( baz: "foo" )
        }
    """

    assert extractor.parse(schema) == [
        RecordedAnnotation("Query", "foo", DirectiveInfo("bar", [DirectiveArgument("foo", "baz")])),
        RecordedAnnotation("Query", "foo", DirectiveInfo("baz", [DirectiveArgument("baz", "foo")])),
    ]


def test_parse_keeps_document_order_across_types(extractor: AnnotationExtractor) -> None:
    schema = """
        type Query @bar(order: 1) { foo: String @baz(order: 2) }
        extend type Query @bar(order: 3)
    """

    orders = [annotation.directive_info.arguments[0].value for annotation in extractor.parse(schema)]

    assert orders == [1, 2, 3]


def test_parse_skips_factories_returning_nothing(extractor: AnnotationExtractor) -> None:
    assert extractor.parse("type Query { foo: String @bam }") == []


def test_parse_schema_ast(extractor: AnnotationExtractor) -> None:
    document = parse("type Query { foo: String @bar }")

    assert extractor.parse(document) == [RecordedAnnotation("Query", "foo", DirectiveInfo(tag="bar"))]


def test_parse_fails_on_unsupported_argument_type(extractor: AnnotationExtractor) -> None:
    schema = """
        enum Arg { NOT_SUPPORTED }

        type Query {
            foo: String @bar(baz: NOT_SUPPORTED)
        }
    """

    with pytest.raises(AnnotationError, match="not supported"):
        extractor.parse(schema)


def test_parse_ignores_unsupported_argument_type_of_unregistered_tags(extractor: AnnotationExtractor) -> None:
    assert extractor.parse("type Query { foo: String @other(baz: NOT_SUPPORTED) }") == []


def test_register_rejects_duplicate_tags() -> None:
    extractor = AnnotationExtractor([RecordingFactory("bar")])

    with pytest.raises(ValueError, match="already registered"):
        extractor.register(RecordingFactory("bar"))


def test_tags() -> None:
    extractor = AnnotationExtractor()
    extractor.register(RecordingFactory("bar"))

    assert extractor.tags == ["bar"]
