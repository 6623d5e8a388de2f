"""Options controlling how API documents are turned into test requests."""

from pydantic import BaseModel, ConfigDict

from swagger_test_source.parser.filter import RequestFilter


class SwaggerOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str | None = None
    request_filter: RequestFilter | None = None
    use_example_values: bool = False
    # Only map operations whose description carries @loadtest or @integrationtest.
    require_test_markers: bool = True
