"""Guidance pipeline: descriptor → prompt → oracle → interpreted result.

GuidanceService.get_guidance() is the only operation the presentation layer
calls. It never raises: oracle and parse failures come back as a degraded
GuidanceResult. Input validation happens before this point (see the wizard).
"""

import logging
import time
from typing import Union

from ezrecycle.advisory_client import AdvisoryClient
from ezrecycle.errors import GuidanceError
from ezrecycle.logic.descriptor import build_description
from ezrecycle.logic.interpreter import interpret
from ezrecycle.models import GuidanceResult, ItemDescriptor
from ezrecycle.prompts import compile_prompt

logger = logging.getLogger(__name__)


class GuidanceService:
    """Runs one sequential guidance request per call."""

    def __init__(self, advisory_client: AdvisoryClient):
        self.advisory_client = advisory_client

    async def get_guidance(self, descriptor: ItemDescriptor) -> GuidanceResult:
        t0 = time.time()
        description = build_description(descriptor)
        prompt = compile_prompt(description)

        reply: Union[str, Exception]
        try:
            reply = await self.advisory_client.request_guidance(prompt)
        except GuidanceError as e:
            reply = e
        except Exception as e:
            logger.exception("Unexpected error from advisory client")
            reply = e

        result = interpret(reply)
        logger.info(f"Guidance for '{descriptor.name}' ready in {round(time.time() - t0, 2)}s")
        return result
