"""Read-only view over a parsed OpenAPI 3.x / Swagger 2.0 document.

The mapper only walks paths and operations through this adapter, so
it does not care which version the document was written in. Lookups
that go through ``$ref`` or nested schema fields are lazy and may raise
``KeyError``/``TypeError`` on malformed input; callers decide whether
such a fault is fatal.
"""

from typing import Any

from swagger_test_source.errors import DocumentLoadError

NON_OPERATION_KEYS = {"parameters", "summary", "description", "servers", "$ref"}
BODY_LOCATIONS = {"body", "formData"}
FORM_MEDIA_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def detect_version(doc: dict) -> int:
    """Return 2 for Swagger 2.0 documents and 3 for OpenAPI 3.x documents."""
    if "openapi" in doc:
        return 3
    if "swagger" in doc:
        return 2
    raise DocumentLoadError("<document>", "missing 'openapi' or 'swagger' version field")


def reference_name(node: Any) -> str:
    """Return the schema name of a ``$ref`` node, or '' for inline schemas."""
    if isinstance(node, dict) and "$ref" in node:
        return node["$ref"].rsplit("/", 1)[-1]
    return ""


class OpenApiDocument:
    """Adapter over the dict produced by the document loader."""

    def __init__(self, raw: dict):
        self.raw = raw
        self.version = detect_version(raw)

    def server_url(self) -> str | None:
        """First server URL (OpenAPI 3) or scheme/host/basePath (Swagger 2)."""
        if self.version == 3:
            servers = self.raw.get("servers") or []
            if not servers or not servers[0].get("url"):
                return None
            url = servers[0]["url"]
            # {variable} placeholders take their declared default
            for name, variable in (servers[0].get("variables") or {}).items():
                if "default" in variable:
                    url = url.replace("{" + name + "}", str(variable["default"]))
            return url
        host = self.raw.get("host")
        base_path = self.raw.get("basePath", "")
        if not host:
            return base_path or None
        schemes = self.raw.get("schemes") or ["https"]
        return f"{schemes[0]}://{host}{base_path}"

    def paths(self) -> list[tuple[str, "PathItem"]]:
        return [(path, PathItem(self, item or {})) for path, item in (self.raw.get("paths") or {}).items()]

    def resolve(self, node: Any) -> Any:
        """Follow local ``$ref`` pointers until a concrete node is reached."""
        seen = set()
        while isinstance(node, dict) and "$ref" in node:
            ref = node["$ref"]
            if ref in seen:
                raise ValueError(f"circular reference: {ref}")
            seen.add(ref)
            if not ref.startswith("#/"):
                raise ValueError(f"external reference not supported: {ref}")
            target = self.raw
            for part in ref[2:].split("/"):
                target = target[part.replace("~1", "/").replace("~0", "~")]
            node = target
        return node

    def schema_properties(self, schema: Any) -> list[tuple[str, dict]]:
        """Properties of a schema, flattening ``allOf`` members one level."""
        schema = self.resolve(schema)
        if schema is None:
            return []
        properties = list((schema.get("properties") or {}).items())
        for member in schema.get("allOf") or []:
            properties.extend((self.resolve(member).get("properties") or {}).items())
        return properties


class PathItem:
    def __init__(self, document: OpenApiDocument, raw: dict):
        self.document = document
        self.raw = document.resolve(raw)

    def operations(self) -> list[tuple[str, "Operation"]]:
        """Operations in declaration order; the verb keys are returned as written."""
        return [
            (verb, Operation(self.document, operation or {}))
            for verb, operation in self.raw.items()
            if verb not in NON_OPERATION_KEYS and not verb.startswith("x-")
        ]


class Operation:
    def __init__(self, document: OpenApiDocument, raw: dict):
        self.document = document
        self.raw = raw

    @property
    def description(self) -> str:
        return self.raw.get("description") or ""

    @property
    def summary(self) -> str:
        return self.raw.get("summary") or ""

    @property
    def operation_id(self) -> str:
        return self.raw.get("operationId") or ""

    @property
    def tags(self) -> list[str]:
        return list(self.raw.get("tags") or [])

    def declared_parameters(self) -> list[Any]:
        """Parameters as written; entries may still be ``$ref`` nodes."""
        return list(self.raw.get("parameters") or [])

    def parameters(self) -> list[dict]:
        """Resolved parameters, excluding Swagger 2 body and form parameters."""
        resolved = [self.document.resolve(p) for p in self.declared_parameters()]
        return [p for p in resolved if p.get("in") not in BODY_LOCATIONS]

    def parameter_schema(self, parameter: dict) -> dict:
        # Swagger 2 keeps type information on the parameter itself.
        if self.document.version == 2:
            schema = {k: v for k, v in parameter.items() if k in ("type", "format", "example")}
            schema["nullable"] = parameter.get("x-nullable", False)
            return schema
        return self.document.resolve(parameter.get("schema")) or {}

    def request_body_content(self) -> list[tuple[str, Any]]:
        """(media type, schema) pairs of the request body, in declaration order."""
        if self.document.version == 3:
            body = self.document.resolve(self.raw.get("requestBody"))
            if not body:
                return []
            return [(media, (entry or {}).get("schema")) for media, entry in (body.get("content") or {}).items()]
        return self._swagger2_body_content()

    def _swagger2_body_content(self) -> list[tuple[str, Any]]:
        declared = [self.document.resolve(p) for p in self.declared_parameters()]
        consumes = self.raw.get("consumes") or self.document.raw.get("consumes") or []
        body = next((p for p in declared if p.get("in") == "body"), None)
        if body is not None:
            media_types = consumes or ["application/json"]
            return [(media, body["schema"]) for media in media_types]
        form = [p for p in declared if p.get("in") == "formData"]
        if not form:
            return []
        schema = {
            "type": "object",
            "properties": {
                p["name"]: {k: p[k] for k in ("type", "format", "description", "example") if k in p}
                for p in form
            },
        }
        media_types = [m for m in consumes if m in FORM_MEDIA_TYPES]
        if not media_types:
            has_file = any(p.get("type") == "file" for p in form)
            media_types = [FORM_MEDIA_TYPES[1] if has_file else FORM_MEDIA_TYPES[0]]
        return [(media, schema) for media in media_types]

    def responses(self) -> list[tuple[str, Any]]:
        """(status code, response) pairs; responses may still be ``$ref`` nodes."""
        return [(str(status), response) for status, response in (self.raw.get("responses") or {}).items()]

    def response_content(self, response: dict) -> list[tuple[str, Any]]:
        """(media type, schema) pairs of one response."""
        if self.document.version == 3:
            return [(media, (entry or {}).get("schema")) for media, entry in (response.get("content") or {}).items()]
        if "schema" not in response:
            return []
        produces = self.raw.get("produces") or self.document.raw.get("produces") or ["application/json"]
        return [(media, response["schema"]) for media in produces]
