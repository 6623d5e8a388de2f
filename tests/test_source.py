import asyncio
import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from swagger_test_source.config import SwaggerOptions
from swagger_test_source.errors import DocumentLoadError
from swagger_test_source.parser.base import ContentType, HttpMethod, RequestBody
from swagger_test_source.parser.document import OpenApiDocument
from swagger_test_source.parser.filter import RequestFilter
from swagger_test_source.source import SwaggerSource

FIXTURES = Path(__file__).parent / "fixtures"
PETS = FIXTURES / "swagger-pets-test.json"
PETSTORE = "https://petstore3.swagger.io/"


def _source(whitelist=(), **options) -> SwaggerSource:
    return SwaggerSource(
        SwaggerOptions(
            base_url=PETSTORE,
            request_filter=RequestFilter(endpoint_name_whitelist=frozenset(whitelist)),
            require_test_markers=False,
            **options,
        )
    )


class TestPetsFixture:
    def test_all_endpoints(self):
        assert len(_source().load([PETS])) == 19

    def test_only_specified_endpoints(self):
        requests = _source({"findPetsByStatus", "deletePet", "addPet", "updatePet"}).load([PETS])
        assert len(requests) == 4

    def test_only_marked_endpoints_by_default(self):
        source = SwaggerSource(SwaggerOptions(base_url=PETSTORE))
        assert len(source.load([PETS])) == 7

    @pytest.mark.parametrize("use_example_values", [False, True])
    def test_upload_pet_image(self, use_example_values):
        requests = _source({"uploadFile"}, use_example_values=use_example_values).load([PETS])

        assert len(requests) == 1
        req = requests[0]
        assert req.authentication_types == ()
        assert req.base_path == "https://petstore3.swagger.io/api/v3"
        assert req.description == ""
        assert req.method == HttpMethod.POST
        assert req.operation_id == "uploadFile"
        assert req.path == "/pet/{petId}/uploadImage"
        assert len(req.responses) == 1
        assert len(req.parameters) == 2
        assert req.summary == "uploads an image"
        assert req.tags == ("pet",)
        assert req.test_types == ()

        assert [p.name for p in req.parameters] == ["petId", "additionalMetadata"]
        assert req.parameters[0].value == (10 if use_example_values else None)
        octet_stream = [b for b in req.request_bodies if b.content_type == ContentType.OCTET_STREAM]
        assert octet_stream == [RequestBody(content_type=ContentType.OCTET_STREAM)]
        assert [p.name for p in req.responses[0].properties] == ["code", "type", "message"]


class TestBasePath:
    def _document(self, **raw) -> OpenApiDocument:
        return OpenApiDocument({"openapi": "3.0.0", "paths": {}, **raw})

    def test_relative_server_url_is_joined(self):
        source = SwaggerSource(SwaggerOptions(base_url="https://petstore3.swagger.io/"))
        doc = self._document(servers=[{"url": "/api/v3"}])
        assert source.base_path(doc) == "https://petstore3.swagger.io/api/v3"

    def test_absolute_server_url_wins(self):
        source = SwaggerSource(SwaggerOptions(base_url="https://petstore3.swagger.io/"))
        doc = self._document(servers=[{"url": "https://other.example.com/v2"}])
        assert source.base_path(doc) == "https://other.example.com/v2"

    def test_no_server_url(self):
        source = SwaggerSource(SwaggerOptions(base_url="https://petstore3.swagger.io/"))
        assert source.base_path(self._document()) == "https://petstore3.swagger.io/"

    def test_no_base_url(self):
        doc = self._document(servers=[{"url": "https://api.example.com"}])
        assert SwaggerSource().base_path(doc) == "https://api.example.com"
        assert SwaggerSource().base_path(self._document()) == ""

    def test_base_url_path_prefix_is_kept(self):
        source = SwaggerSource(SwaggerOptions(base_url="https://gateway.example.com/prefix/"))
        doc = self._document(servers=[{"url": "/api/v3"}])
        assert source.base_path(doc) == "https://gateway.example.com/prefix/api/v3"

    def test_server_variables_take_their_defaults(self):
        servers = [{
            "url": "{scheme}://api.example.com/{version}",
            "variables": {"scheme": {"default": "https", "enum": ["http", "https"]}, "version": {"default": "v2"}},
        }]
        assert SwaggerSource().base_path(self._document(servers=servers)) == "https://api.example.com/v2"


class TestMultipleSources:
    def _write_doc(self, path: Path, operation_id: str) -> Path:
        doc = {"openapi": "3.0.0", "paths": {f"/{operation_id}": {"get": {"operationId": operation_id, "description": "@loadtest"}}}}
        path.write_text(json.dumps(doc), encoding="utf-8")
        return path

    def test_results_follow_source_order(self, tmp_path):
        first = self._write_doc(tmp_path / "a.json", "first")
        second = self._write_doc(tmp_path / "b.json", "second")
        requests = SwaggerSource().load([second, first])
        assert [r.operation_id for r in requests] == ["second", "first"]

    def test_load_async_matches_load(self, tmp_path):
        sources = [self._write_doc(tmp_path / f"{name}.json", name) for name in ("one", "two", "three")]
        source = SwaggerSource()
        assert asyncio.run(source.load_async(sources)) == source.load(sources)

    def test_failure_in_one_source_fails_the_load(self, tmp_path):
        good = self._write_doc(tmp_path / "good.json", "good")
        with pytest.raises(DocumentLoadError):
            SwaggerSource().load([good, tmp_path / "missing.json"])

    @patch("swagger_test_source.parser.loader.requests.get")
    def test_url_source(self, mock_get):
        mock_response = MagicMock()
        mock_response.text = PETS.read_text(encoding="utf-8")
        mock_get.return_value = mock_response

        requests = _source({"uploadFile"}).load(["https://petstore3.swagger.io/api/v3/openapi.json"])

        assert len(requests) == 1
        mock_get.assert_called_once()
