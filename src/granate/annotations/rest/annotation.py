"""
The ``@rest`` annotation: resolves query fields with REST requests.

Examples:

- Basic usage::

    type Query {
        todos: [Todo] @rest(url: "https://todos.com/todos")
    }

  ``{ todos { id title } }`` sends ``GET https://todos.com/todos``.

- Field arguments become request parameters (query string for GET, body otherwise)::

    type Query {
        todos(completed: Boolean, max: Int): [Todo] @rest(url: "https://todos.com/todos", method: "post")
    }

- URL templates take their values from the field arguments, the remaining ones are sent as parameters::

    type Query {
        todo(id: ID, fields: String): Todo @rest(url: "https://todos.com/todos/{{id}}")
    }

- ``parameters`` restricts the arguments sent, ``resultField`` selects a field of the response body::

    type Query {
        todos(q: String, page: Int): [Todo]
        @rest(url: "https://todos.com/todos", parameters: ["q"], resultField: "items")
    }

- Type level defaults (base URL, authorization, headers) apply to every field of the type.
  ``{{NAME}}`` in authorization and header values is replaced with the environment variable ``NAME``::

    type Query @rest(
        baseUrl: "https://todos.com"
        tokenAuthorization: "{{TODOS_TOKEN}}"
        customHeaders: ["Accept-Language: en"]
    ) {
        todos: [Todo] @rest(url: "todos")
    }
"""

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from graphql import GraphQLResolveInfo, GraphQLSchema, Undefined

from granate import log
from granate.annotations.arguments import ArgumentDescriptor, extract_arguments, require_type_name
from granate.annotations.models import DirectiveInfo, Mocks
from granate.annotations.rest.loader import CoalescingLoader
from granate.annotations.rest.request import HttpSession, RequestDescriptor, make_request, serialize_request_key
from granate.context import OperationContext
from granate.errors import AnnotationError

REST_TAG = "rest"

TEMPLATE_PATTERN = re.compile(r"\{\{(.*?)\}\}")
ABSOLUTE_URL_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


@dataclass
class RequestDefaults:
    """Request settings shared by the REST fields of one type within one operation."""

    json: bool = True
    jar: bool = True
    method: str = "get"
    base_url: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RestArguments:
    base_url: str | None = None
    url: str | None = None
    parameters: list[str] | None = None
    method: str | None = None
    result_field: str | None = None
    basic_authorization: str | None = None
    token_authorization: str | None = None
    custom_headers: list[str] | None = None


def get_request_defaults(context: OperationContext, type_name: str) -> RequestDefaults:
    defaults = context.request_defaults.get(type_name)
    if defaults is None:
        defaults = RequestDefaults(headers={"User-Agent": context.config.user_agent})
        context.request_defaults[type_name] = defaults
    return defaults


def get_loader(context: OperationContext) -> CoalescingLoader[RequestDescriptor]:
    """Return the request loader of the operation, creating it on first use."""
    if context.loader is None:
        if context.http_session is None:
            context.http_session = HttpSession(timeout=context.config.timeout)
        session = context.http_session

        async def load(descriptor: RequestDescriptor) -> Any:
            body = await make_request(descriptor, session)
            return select_result(body, descriptor.result_field)

        context.loader = CoalescingLoader(load, key_fn=serialize_request_key)
    loader: CoalescingLoader[RequestDescriptor] = context.loader
    return loader


def select_result(body: Any, result_field: str | None) -> Any:
    if not result_field:
        return body
    if not isinstance(body, Mapping):
        raise TypeError(f"Cannot select field: '{result_field}' of a response of type: '{type(body).__name__}'")
    return body.get(result_field)


def resolve_environment_value(value: str, environ: Mapping[str, str] | None = None) -> str:
    """Replace the ``{{NAME}}`` templates of a value with environment variables.

    Raises:
        AnnotationError: If a referenced environment variable is not set.
    """
    environ = os.environ if environ is None else environ

    def replace(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        if name not in environ:
            raise AnnotationError(f"Environment variable: '{name}' referenced in '{REST_TAG}' annotation is not set.")
        return environ[name]

    return TEMPLATE_PATTERN.sub(replace, value)


def parse_custom_headers(custom_headers: list[str]) -> list[tuple[str, str]]:
    headers = []
    for header in custom_headers:
        name, separator, value = str(header).partition(":")
        if not separator or not name.strip():
            raise AnnotationError(
                f"Custom header: '{header}' in '{REST_TAG}' annotation must have the form 'Name: value'."
            )
        headers.append((name.strip(), value.strip()))
    return headers


def is_absolute_url(url: str) -> bool:
    return ABSOLUTE_URL_PATTERN.match(url) is not None


def expand_url_template(url: str, arguments: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
    """
    Replace the ``{{name}}`` templates of a URL with call arguments.

    Args:
        url: The URL template.
        arguments: The call arguments, without empty values.

    Returns:
        tuple[str, dict[str, Any]]: The URL and the arguments that were not used by a template.

    Raises:
        AnnotationError: If a template has no matching argument.
    """
    remaining = dict(arguments)

    def replace(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        if name not in arguments:
            raise AnnotationError(f"Replacement value for url argument: '{name}' not found.")
        remaining.pop(name, None)
        return str(arguments[name])

    return TEMPLATE_PATTERN.sub(replace, url), remaining


def non_empty_arguments(arguments: Mapping[str, Any]) -> dict[str, Any]:
    return {name: value for name, value in arguments.items() if value is not None and value is not Undefined}


@dataclass
class RestAnnotation:
    type_name: str
    field_name: str | None = None
    arguments: RestArguments = field(default_factory=RestArguments)

    def apply(
        self, schema: GraphQLSchema, mocks: Mocks, root_value: dict[str, Any], context: OperationContext
    ) -> None:
        defaults = get_request_defaults(context, self.type_name)
        self._apply_to_defaults(defaults)

        if self.field_name is None:
            return

        if schema.get_type(self.type_name) is not schema.query_type:
            raise AnnotationError(
                f"Only annotation of query fields is supported, '{self.type_name}.{self.field_name}' is not one."
            )
        if self.arguments.url is None:
            raise AnnotationError("Annotation argument: 'url' is required when annotating a field.")

        root_value[self.field_name] = self._create_resolver(defaults)
        log.debug(f"Installed REST resolver for {self.type_name}.{self.field_name}: {self.arguments.url}")

    def _apply_to_defaults(self, defaults: RequestDefaults) -> None:
        arguments = self.arguments
        if arguments.base_url:
            defaults.base_url = arguments.base_url

        if arguments.basic_authorization:
            defaults.headers["Authorization"] = f"Basic {resolve_environment_value(arguments.basic_authorization)}"
        elif arguments.token_authorization:
            defaults.headers["Authorization"] = f"Token {resolve_environment_value(arguments.token_authorization)}"

        for name, value in parse_custom_headers(arguments.custom_headers or []):
            defaults.headers[name] = resolve_environment_value(value)

    def _create_resolver(self, defaults: RequestDefaults) -> Any:
        arguments = self.arguments
        url_template: str = arguments.url  # type: ignore[assignment]

        def resolve(info: GraphQLResolveInfo, **call_arguments: Any) -> Any:
            url, remaining = expand_url_template(url_template, non_empty_arguments(call_arguments))
            if arguments.parameters is not None:
                remaining = {name: value for name, value in remaining.items() if name in arguments.parameters}

            base_url = None if is_absolute_url(url) else (arguments.base_url or defaults.base_url)
            descriptor = RequestDescriptor(
                method=arguments.method or defaults.method,
                base_url=base_url,
                url=url,
                parameters=remaining,
                headers=dict(defaults.headers),
                result_field=arguments.result_field,
                json=defaults.json,
                jar=defaults.jar,
            )
            return get_loader(info.context).load(descriptor)

        return resolve


class RestAnnotationFactory:
    tag = REST_TAG

    argument_descriptors = {
        "baseUrl": ArgumentDescriptor(str),
        "url": ArgumentDescriptor(str),
        "parameters": ArgumentDescriptor(list),
        "method": ArgumentDescriptor(str),
        "resultField": ArgumentDescriptor(str),
        "basicAuthorization": ArgumentDescriptor(str),
        "tokenAuthorization": ArgumentDescriptor(str),
        "customHeaders": ArgumentDescriptor(list),
    }

    def build(
        self, directive_info: DirectiveInfo, type_name: str | None, field_name: str | None = None
    ) -> RestAnnotation:
        type_name = require_type_name(self.tag, type_name)
        extracted = extract_arguments(self.tag, directive_info.arguments, self.argument_descriptors)

        if "basicAuthorization" in extracted and "tokenAuthorization" in extracted:
            raise AnnotationError(
                f"Only one of 'basicAuthorization' or 'tokenAuthorization' is allowed in '{self.tag}' annotation."
            )
        if "customHeaders" in extracted:
            parse_custom_headers(extracted["customHeaders"])

        arguments = RestArguments(
            base_url=extracted.get("baseUrl"),
            url=extracted.get("url"),
            parameters=extracted.get("parameters"),
            method=extracted.get("method"),
            result_field=extracted.get("resultField"),
            basic_authorization=extracted.get("basicAuthorization"),
            token_authorization=extracted.get("tokenAuthorization"),
            custom_headers=extracted.get("customHeaders"),
        )
        return RestAnnotation(type_name=type_name, field_name=field_name, arguments=arguments)


rest_annotation_factory = RestAnnotationFactory()
