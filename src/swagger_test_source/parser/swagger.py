"""OpenAPI / Swagger document mapper.

Walks every path and operation of a parsed document and converts each
testable operation into an HttpTestRequest.
"""

import logging
from typing import Any

from swagger_test_source.errors import InvalidHttpMethodError

from .base import ContentType, HttpMethod, HttpTestRequest, Parameter, Property, RequestBody, Response
from .document import BODY_LOCATIONS, OpenApiDocument, Operation, reference_name
from .markers import classify_authentication_types, classify_test_types, is_testable

logger = logging.getLogger(__name__)

# Faults raised by lookups into malformed schemas.
EXTRACTION_ERRORS = (KeyError, TypeError, AttributeError, ValueError, IndexError)


def map_document(
    base_url: Any,
    document: OpenApiDocument | dict,
    use_example_values: bool = False,
    require_test_markers: bool = True,
) -> list[HttpTestRequest]:
    """Map all testable operations of a document to HttpTestRequest records.

    An operation whose verb is not a known HTTP method aborts the whole
    call with InvalidHttpMethodError. Faults while reading a request body
    or a response only empty that part and are listed in ``diagnostics``.
    """
    if not isinstance(document, OpenApiDocument):
        document = OpenApiDocument(document)

    requests = []
    for path, path_item in document.paths():
        for verb, operation in path_item.operations():
            if require_test_markers and not is_testable(operation.description):
                logger.debug("Skipping %s %s: no test marker in description", verb.upper(), path)
                continue
            requests.append(_map_operation(str(base_url), path, verb, operation, use_example_values))

    logger.info("Mapped %d testable operations", len(requests))
    return requests


def _map_operation(
    base_path: str, path: str, verb: str, operation: Operation, use_example_values: bool
) -> HttpTestRequest:
    diagnostics: list[str] = []
    label = f"{verb.upper()} {path}"

    return HttpTestRequest(
        base_path=base_path,
        path=path,
        method=_http_method(path, verb),
        summary=operation.summary,
        description=operation.description,
        operation_id=operation.operation_id,
        parameters=_parse_parameters(operation, use_example_values, diagnostics, label),
        request_bodies=_parse_request_bodies(operation, use_example_values, diagnostics, label),
        responses=_parse_responses(operation, use_example_values, diagnostics, label),
        tags=list(dict.fromkeys(operation.tags)),
        authentication_types=classify_authentication_types(operation.description),
        test_types=classify_test_types(operation.description),
        diagnostics=diagnostics,
    )


def _http_method(path: str, verb: str) -> HttpMethod:
    try:
        return HttpMethod(verb.upper())
    except ValueError:
        raise InvalidHttpMethodError(path, verb) from None


def _parse_parameters(
    operation: Operation, use_example_values: bool, diagnostics: list[str], label: str
) -> list[Parameter]:
    try:
        declared = operation.declared_parameters()
    except EXTRACTION_ERRORS as e:
        _degrade(diagnostics, f"{label}: parameters could not be read ({e!r})")
        return []

    result = []
    for index, raw in enumerate(declared):
        try:
            p = operation.document.resolve(raw)
            if p.get("in") in BODY_LOCATIONS:
                continue
            schema = operation.parameter_schema(p)
            type_, nullable = _schema_type(schema)
            value = _example_value(p, schema) if use_example_values else None
            result.append(
                Parameter(
                    name=p["name"],
                    type=type_,
                    nullable=nullable,
                    location=p.get("in", "query"),
                    required=bool(p.get("required", False)),
                    format=schema.get("format"),
                    value=value,
                )
            )
        except EXTRACTION_ERRORS as e:
            _degrade(diagnostics, f"{label}: parameter #{index} could not be read ({e!r})")
    return result


def _schema_type(schema: dict) -> tuple[str | None, bool]:
    """Return (type, nullable); OpenAPI 3.1 lists "null" among the types instead."""
    declared = schema.get("type")
    nullable = bool(schema.get("nullable", False))
    if not isinstance(declared, list):
        return declared, nullable
    types = [t for t in declared if t != "null"]
    return (types[0] if types else None), nullable or len(types) < len(declared)


def _example_value(parameter: dict, schema: dict) -> Any:
    if "example" in parameter:
        return parameter["example"]
    examples = parameter.get("examples")
    if isinstance(examples, dict) and examples:
        first = next(iter(examples.values()))
        if isinstance(first, dict):
            return first.get("value")
    return schema.get("example")


def _parse_request_bodies(
    operation: Operation, use_example_values: bool, diagnostics: list[str], label: str
) -> list[RequestBody]:
    try:
        content = operation.request_body_content()
    except EXTRACTION_ERRORS as e:
        _degrade(diagnostics, f"{label}: request body could not be read ({e!r})")
        return []

    bodies = []
    for media_type, schema in content:
        content_type = ContentType.from_media_type(media_type)
        if content_type is None:
            _degrade(diagnostics, f"{label}: skipped unsupported request content type '{media_type}'")
            continue
        try:
            properties = _parse_properties(operation, schema, use_example_values)
        except EXTRACTION_ERRORS as e:
            _degrade(diagnostics, f"{label}: request body '{media_type}' could not be read ({e!r})")
            bodies.append(RequestBody(content_type=content_type))
            continue
        if not properties:
            bodies.append(RequestBody(content_type=content_type))
            continue
        bodies.append(
            RequestBody(
                content_type=content_type,
                reference_name=reference_name(schema),
                properties=properties,
            )
        )
    return bodies


def _parse_responses(
    operation: Operation, use_example_values: bool, diagnostics: list[str], label: str
) -> list[Response]:
    try:
        responses = operation.responses()
    except EXTRACTION_ERRORS as e:
        _degrade(diagnostics, f"{label}: responses could not be read ({e!r})")
        return []

    result = []
    for status_code, raw in responses:
        description = ""
        try:
            response = operation.document.resolve(raw)
            description = response.get("description") or ""
            content = operation.response_content(response)
            properties = _parse_properties(operation, content[0][1], use_example_values) if content else []
        except EXTRACTION_ERRORS as e:
            _degrade(diagnostics, f"{label}: response '{status_code}' could not be read ({e!r})")
            properties = []
        result.append(Response(status_code=status_code, description=description, properties=properties))
    return result


def _parse_properties(operation: Operation, schema: Any, use_example_values: bool) -> list[Property]:
    document = operation.document
    result = []
    for name, raw in document.schema_properties(schema):
        prop = document.resolve(raw)
        type_, nullable = _schema_type(prop)
        result.append(
            Property(
                name=name,
                description=raw.get("description") or prop.get("description") or "",
                type=type_,
                nullable=nullable,
                format=prop.get("format"),
                value=prop.get("example") if use_example_values else None,
            )
        )
    return result


def _degrade(diagnostics: list[str], message: str) -> None:
    logger.warning(message)
    diagnostics.append(message)
