"""Request pipeline: validate, fetch the catalog, build the prompt, complete."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError

from flavormix.core.catalog import CatalogStore
from flavormix.core.model_interface import BaseCompletionClient
from flavormix.core.prompt_builder import build_messages, build_prompt
from flavormix.errors import InvalidArgument, MixError, UpstreamFailure
from flavormix.models.schemas import MixRequest, MixResult

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing userId or query in request body."


class PipelineState(str, Enum):
    """Steps a mix request moves through."""
    VALIDATING = "validating"
    FETCHING = "fetching"
    COMPOSING = "composing"
    COMPLETING = "completing"
    RESPONDING = "responding"
    FAILED = "failed"


@dataclass
class MixOutcome:
    """Result of running one request through the pipeline."""
    state: PipelineState
    result: Optional[MixResult] = None
    error: Optional[MixError] = None
    failed_at: Optional[PipelineState] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def validate_request(payload: Any) -> MixRequest:
    """Check that the payload carries a non-empty userId and query."""
    if not isinstance(payload, dict):
        raise InvalidArgument(MISSING_FIELDS_MESSAGE)
    try:
        return MixRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidArgument(MISSING_FIELDS_MESSAGE) from e


class MixPipeline:
    """Runs a mix request through its steps, stopping at the first failure."""

    def __init__(
        self,
        catalog: CatalogStore,
        completion_client: BaseCompletionClient,
        max_tokens: int = 150
    ):
        self.catalog = catalog
        self.completion_client = completion_client
        self.max_tokens = max_tokens

    async def run(self, payload: Any) -> MixOutcome:
        state = PipelineState.VALIDATING
        try:
            request = validate_request(payload)

            state = PipelineState.FETCHING
            flavors = await self.catalog.fetch_all()
            logger.info(f"Fetched {len(flavors)} flavors from {self.catalog.backend_name} catalog")

            state = PipelineState.COMPOSING
            prompt = build_prompt(flavors, request.query)

            state = PipelineState.COMPLETING
            text = await self.completion_client.complete(
                build_messages(prompt),
                max_tokens=self.max_tokens
            )
        except InvalidArgument as e:
            logger.info(f"Rejected mix request: {e.message}")
            return MixOutcome(state=PipelineState.FAILED, error=e, failed_at=state)
        except UpstreamFailure as e:
            logger.error(f"Error generating mix while {state.value}: {e.message}", exc_info=e)
            return MixOutcome(state=PipelineState.FAILED, error=e, failed_at=state)
        except Exception as e:
            logger.exception(f"Unexpected error generating mix while {state.value}")
            error = UpstreamFailure(f"Unexpected error while {state.value}: {e}")
            error.__cause__ = e
            return MixOutcome(state=PipelineState.FAILED, error=error, failed_at=state)

        return MixOutcome(
            state=PipelineState.RESPONDING,
            result=MixResult(response=text.strip())
        )
