from __future__ import annotations

import logging

from app.application.pipeline.base import PipelineContext, BaseStep
from app.core.exceptions import ClientInputError

logger = logging.getLogger(__name__)


class ValidateQueryStep(BaseStep):
    """Input:  input["query"] (raw ``q`` parameter, may be None)
    Output: query (stripped, non-empty)
    """

    name = "validate_query"

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        raw = context.input.get("query")
        query = raw.strip() if isinstance(raw, str) else ""
        if not query:
            raise ClientInputError()
        context.set("query", query)
        context.ensure_request_id()
