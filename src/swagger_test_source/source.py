"""Load API documents and turn them into filtered test requests."""

import asyncio
import logging
from pathlib import Path
from urllib.parse import urljoin

from swagger_test_source.config import SwaggerOptions
from swagger_test_source.parser.base import HttpTestRequest
from swagger_test_source.parser.document import OpenApiDocument
from swagger_test_source.parser.filter import filter_requests
from swagger_test_source.parser.loader import load_document
from swagger_test_source.parser.swagger import map_document

logger = logging.getLogger(__name__)


class SwaggerSource:
    """Produces HttpTestRequest lists from Swagger/OpenAPI files or URLs."""

    def __init__(self, options: SwaggerOptions | None = None):
        self.options = options or SwaggerOptions()

    def load(self, sources: list[str | Path]) -> list[HttpTestRequest]:
        """Load every source in turn; results are concatenated in source order."""
        requests = []
        for source in sources:
            requests.extend(self._load_one(source))
        return requests

    async def load_async(self, sources: list[str | Path]) -> list[HttpTestRequest]:
        """Like load(), but reads the sources concurrently."""
        results = await asyncio.gather(*(asyncio.to_thread(self._load_one, s) for s in sources))
        return [request for result in results for request in result]

    def map(self, raw: dict) -> list[HttpTestRequest]:
        """Map and filter an already parsed document."""
        document = OpenApiDocument(raw)
        requests = map_document(
            self.base_path(document),
            document,
            use_example_values=self.options.use_example_values,
            require_test_markers=self.options.require_test_markers,
        )
        return filter_requests(requests, self.options.request_filter)

    def base_path(self, document: OpenApiDocument) -> str:
        """Configured base URL joined with the document's server URL.

        A root-relative server URL ("/api/v3") is appended to the base URL's
        own path, an absolute one replaces the base URL.
        """
        server_url = document.server_url()
        base_url = self.options.base_url
        if not base_url:
            return server_url or ""
        if not server_url:
            return base_url
        if server_url.startswith("/"):
            return base_url.rstrip("/") + server_url
        return urljoin(base_url, server_url)

    def _load_one(self, source: str | Path) -> list[HttpTestRequest]:
        requests = self.map(load_document(source))
        logger.info("%s: %d requests after filtering", source, len(requests))
        return requests
