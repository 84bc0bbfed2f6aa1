"""Core logic for the recycling guidance pipeline."""

from .descriptor import build_description
from .interpreter import (
    degraded_result,
    extract_json_span,
    interpret,
    parse_guidance,
)
from .wizard import (
    GuideWizard,
    WizardForm,
    WizardStage,
    validate_descriptor,
)
