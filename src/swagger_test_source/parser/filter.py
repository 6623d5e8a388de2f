"""Operation-name filtering of mapped requests."""

import logging

from pydantic import BaseModel, ConfigDict

from .base import HttpTestRequest

logger = logging.getLogger(__name__)


class RequestFilter(BaseModel):
    """Which operations to keep, by operationId. Empty sets do not filter."""

    model_config = ConfigDict(frozen=True)

    endpoint_name_whitelist: frozenset[str] = frozenset()
    endpoint_name_blacklist: frozenset[str] = frozenset()


def filter_requests(
    requests: list[HttpTestRequest], request_filter: RequestFilter | None
) -> list[HttpTestRequest]:
    """Keep the requests that pass both the whitelist and the blacklist, in input order."""
    if request_filter is None:
        return list(requests)

    whitelist = request_filter.endpoint_name_whitelist
    blacklist = request_filter.endpoint_name_blacklist
    result = [
        r
        for r in requests
        if (not whitelist or r.operation_id in whitelist) and r.operation_id not in blacklist
    ]
    logger.debug("Request filter kept %d of %d requests", len(result), len(requests))
    return result
