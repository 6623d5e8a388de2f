"""Data models for testable HTTP requests.

The mapper converts every testable operation of an API document
into an HttpTestRequest built from these models.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    TRACE = "TRACE"
    PATCH = "PATCH"


class ContentType(str, Enum):
    """Media types a request body or response may be declared with."""

    JSON = "application/json"
    XML = "application/xml"
    TEXT_PLAIN = "text/plain"
    FORM_URL_ENCODED = "application/x-www-form-urlencoded"
    MULTIPART_FORM_DATA = "multipart/form-data"
    OCTET_STREAM = "application/octet-stream"
    JSON_PATCH = "application/json-patch+json"
    ANY = "*/*"

    @classmethod
    def from_media_type(cls, media_type: str) -> "ContentType | None":
        """Match a declared media type, ignoring parameters such as charset."""
        base = media_type.split(";", 1)[0].strip().lower()
        for member in cls:
            if member.value == base:
                return member
        return None


class TestType(str, Enum):
    """Kind of test an operation is marked for in its description."""

    __test__ = False  # not a pytest test class

    INTEGRATION_TEST = "IntegrationTest"
    LOAD_TEST = "LoadTest"
    SECURITY_TEST = "SecurityTest"
    SQL_TEST = "SqlTest"

    @property
    def marker(self) -> str:
        return TEST_TYPE_MARKERS[self]


class AuthenticationType(str, Enum):
    """Authentication regime an operation is marked for in its description."""

    ADMINISTRATOR = "Administrator"
    CUSTOMER = "Customer"
    API_KEY = "ApiKey"
    OAUTH2 = "Oauth2"

    @property
    def marker(self) -> str:
        return AUTHENTICATION_TYPE_MARKERS[self]


TEST_TYPE_MARKERS: dict[TestType, str] = {
    TestType.INTEGRATION_TEST: "@integrationtest",
    TestType.LOAD_TEST: "@loadtest",
    TestType.SECURITY_TEST: "@securitytest",
    TestType.SQL_TEST: "@sqltest",
}

AUTHENTICATION_TYPE_MARKERS: dict[AuthenticationType, str] = {
    AuthenticationType.ADMINISTRATOR: "@administrator",
    AuthenticationType.CUSTOMER: "@customer",
    AuthenticationType.API_KEY: "@apikey",
    AuthenticationType.OAUTH2: "@oauth2",
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Parameter(_Frozen):
    """A single declared operation parameter."""

    name: str
    type: str | None = None
    nullable: bool = False
    location: str = "query"  # query / path / header / cookie
    required: bool = False
    format: str | None = None
    value: Any = None  # declared example, only when example values are requested


class Property(_Frozen):
    """A top-level property of a request or response schema."""

    name: str
    description: str = ""
    type: str | None = None
    nullable: bool = False
    format: str | None = None
    value: Any = None


class RequestBody(_Frozen):
    content_type: ContentType | None = None
    reference_name: str = ""
    properties: tuple[Property, ...] = ()


class Response(_Frozen):
    status_code: str
    description: str = ""
    properties: tuple[Property, ...] = ()


class HttpTestRequest(_Frozen):
    """Everything a test runner needs to execute and validate one operation."""

    base_path: str
    path: str
    method: HttpMethod
    summary: str = ""
    description: str = ""
    operation_id: str = ""
    parameters: tuple[Parameter, ...] = ()
    request_bodies: tuple[RequestBody, ...] = ()
    responses: tuple[Response, ...] = ()
    tags: tuple[str, ...] = ()
    authentication_types: tuple[AuthenticationType, ...] = ()
    test_types: tuple[TestType, ...] = ()
    diagnostics: tuple[str, ...] = ()  # one entry per degraded or skipped part of the operation
