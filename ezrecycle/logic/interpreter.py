"""Response Interpreter — raw oracle text → GuidanceResult.

The oracle is asked for JSON only but may wrap it in prose or markdown
fences. Extraction is a greedy bracket span: first "{" to last "}" in the
text. When that span is not valid JSON no second attempt is made, even if an
inner span would parse. Replies containing several independent JSON-like
spans are therefore mis-extracted; this is a known limitation kept for
compatibility with existing replies.

interpret() never raises. Every failure (oracle error, no JSON, bad JSON, a JSON
value that is not an object) produces the degraded GuidanceResult, which
has the same shape as a real one.
"""

import json
import logging
import re
from typing import Optional, Union

from ezrecycle.errors import MalformedReply
from ezrecycle.models import GuidanceResult

logger = logging.getLogger(__name__)

_JSON_SPAN = re.compile(r"\{[\s\S]*\}")

UNABLE_TO_DETERMINE = "Unable to determine"


def extract_json_span(text: str) -> Optional[str]:
    """Return the first-"{"-to-last-"}" span of text, or None."""
    match = _JSON_SPAN.search(text)
    if match:
        return match.group(0)
    return None


def parse_guidance(text: str) -> GuidanceResult:
    """Parse raw reply text into a GuidanceResult.

    The object is used as-is: missing keys stay None, nothing is synthesized,
    and values keep whatever JSON type the oracle chose.

    Raises:
        MalformedReply: no span, a span that does not decode, or a decoded
            value that is not an object.
    """
    span = extract_json_span(text)
    if span is None:
        raise MalformedReply(text)

    try:
        data = json.loads(span)
    except (ValueError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder can follow
        raise MalformedReply(f"Invalid JSON in reply: {e}") from e

    if not isinstance(data, dict):
        raise MalformedReply(f"Expected a JSON object, got {type(data).__name__}")

    return GuidanceResult.model_validate(data)


def degraded_result(cause: str) -> GuidanceResult:
    """Build the fixed fallback guidance, embedding the failure cause."""
    return GuidanceResult.model_validate({
        "analysis": {
            "item": f"Error analyzing item: {cause}",
            "material": "Unknown",
            "recyclability": UNABLE_TO_DETERMINE,
        },
        "instructions": {
            "method": "Please try again or consult local guidelines",
            "preparation": ["Unable to provide guidance"],
            "location": "Contact local waste management",
        },
        "warnings": ["Service temporarily unavailable"],
        "environmentalImpact": "Proper disposal is important for environmental protection",
        "alternatives": {
            "reuse": ["Consider if item can be repaired or repurposed"],
            "donation": "Check if item is still useful to others",
            "upcycling": ["Look for creative reuse ideas online"],
        },
        "tips": ["Always follow local recycling guidelines", "When in doubt, don't recycle"],
        "relatedItems": [],
    })


def _describe_error(error: BaseException) -> str:
    return str(error) or type(error).__name__


def interpret(reply: Union[str, BaseException]) -> GuidanceResult:
    """Turn an oracle reply (or the error raised instead of one) into guidance."""
    if isinstance(reply, BaseException):
        logger.warning(f"Guidance request failed, returning degraded result: {_describe_error(reply)}")
        return degraded_result(_describe_error(reply))

    try:
        return parse_guidance(reply)
    except MalformedReply as e:
        logger.warning(f"Could not parse guidance reply ({len(reply)} chars): {str(e)[:200]}")
        return degraded_result(str(e))
