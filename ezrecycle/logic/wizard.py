"""Guide Wizard — multi-step input collection for one recycling request.

Stages:
    NAME → MATERIALS → PHYSICAL_DETAILS → ADDITIONAL_INFO → SUBMITTING → RESULT | FAILED

Rules:
1. Movement is forward/backward between the four input stages only
2. Forward out of NAME needs a non-blank name; out of MATERIALS at least one material
3. SUBMITTING is reachable only from ADDITIONAL_INFO via submit()
4. Submission re-checks name + materials; failure returns to ADDITIONAL_INFO with an error
5. Any field edit clears the visible error
6. reset() always returns to NAME and discards any in-flight result
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

from ezrecycle.config_loader import VocabularyConfig, WizardMessages, get_config
from ezrecycle.errors import ValidationError
from ezrecycle.models import GuidanceResult, ItemDescriptor

if TYPE_CHECKING:
    from ezrecycle.guidance import GuidanceService

logger = logging.getLogger(__name__)


class WizardStage(str, Enum):
    """Wizard stages. The first four collect input."""
    NAME = "name"
    MATERIALS = "materials"
    PHYSICAL_DETAILS = "physical_details"
    ADDITIONAL_INFO = "additional_info"
    SUBMITTING = "submitting"
    RESULT = "result"
    FAILED = "failed"


INPUT_STAGES = [
    WizardStage.NAME,
    WizardStage.MATERIALS,
    WizardStage.PHYSICAL_DETAILS,
    WizardStage.ADDITIONAL_INFO,
]

ENTER_KEY = "Enter"

# Form fields editable through set_field(); materials use toggle_material().
TEXT_FIELDS = (
    "name",
    "materials_other",
    "plastic_code",
    "size",
    "condition",
    "has_labels",
    "quantity",
    "special_features",
    "location",
)


@dataclass
class WizardForm:
    """Raw form values. Empty string means "not provided"."""
    name: str = ""
    materials: list[str] = field(default_factory=list)
    materials_other: str = ""
    plastic_code: str = ""
    size: str = ""
    condition: str = ""
    has_labels: str = ""
    quantity: str = ""
    special_features: str = ""
    location: str = ""


def _optional(value: str) -> Optional[str]:
    value = value.strip()
    return value if value else None


def _allowed_values(vocabulary: VocabularyConfig, field_name: str) -> Optional[list[str]]:
    """Closed vocabulary for a select field, or None for free-text fields."""
    return {
        "plastic_code": vocabulary.plastic_code_values,
        "size": vocabulary.sizes,
        "condition": vocabulary.conditions,
    }.get(field_name)


def validate_descriptor(
    descriptor: ItemDescriptor,
    vocabulary: Optional[VocabularyConfig] = None,
    messages: Optional[WizardMessages] = None,
):
    """Pre-submission validation shared by the wizard and the direct API.

    Raises:
        ValidationError: with the corrective message for the first problem.
    """
    config = get_config()
    vocabulary = vocabulary or config.vocabulary
    messages = messages or config.wizard.messages

    if not descriptor.name.strip():
        raise ValidationError(messages.missing_name, field="name")
    if not descriptor.materials:
        raise ValidationError(messages.missing_materials, field="materials")

    unknown = [m for m in descriptor.materials if m not in vocabulary.materials]
    if unknown:
        raise ValidationError(f"Unknown material: '{unknown[0]}'", field="materials")
    for field_name in ("plastic_code", "size", "condition"):
        allowed = _allowed_values(vocabulary, field_name)
        value = getattr(descriptor, field_name)
        if value is not None and value not in allowed:
            raise ValidationError(f"Unknown {field_name.replace('_', ' ')}: '{value}'", field=field_name)


@dataclass
class GuideWizard:
    """State machine behind the step-by-step recycling guide form."""

    form: WizardForm = field(default_factory=WizardForm)
    stage: WizardStage = WizardStage.NAME
    error: str = ""
    result: Optional[GuidanceResult] = None
    is_loading: bool = False

    vocabulary: VocabularyConfig = field(default_factory=lambda: get_config().vocabulary, repr=False)
    messages: WizardMessages = field(default_factory=lambda: get_config().wizard.messages, repr=False)

    # Bumped on every submit/reset so a late result from an abandoned
    # submission can be recognised and dropped.
    _submission_id: int = field(default=0, repr=False)

    # -------------------------------------------------------------------------
    # Field editing
    # -------------------------------------------------------------------------

    def _check_vocabulary(self, field_name: str, value: str):
        allowed = _allowed_values(self.vocabulary, field_name)
        if allowed is not None and value and value not in allowed:
            raise ValidationError(f"Unknown {field_name.replace('_', ' ')}: '{value}'", field=field_name)

    def set_field(self, field_name: str, value: Optional[str]):
        """Update one text/select field and clear any visible error."""
        if field_name not in TEXT_FIELDS:
            raise ValidationError(f"Unknown field: '{field_name}'", field=field_name)
        value = value or ""
        self._check_vocabulary(field_name, value)
        setattr(self.form, field_name, value)
        self.error = ""

    def toggle_material(self, material: str) -> bool:
        """Select or deselect a material. Returns True if it is now selected."""
        if material not in self.vocabulary.materials:
            raise ValidationError(f"Unknown material: '{material}'", field="materials")
        self.error = ""
        if material in self.form.materials:
            self.form.materials = [m for m in self.form.materials if m != material]
            return False
        self.form.materials = [*self.form.materials, material]
        return True

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    @property
    def step_number(self) -> int:
        """1-based step for input stages; one past the last step afterwards."""
        if self.stage in INPUT_STAGES:
            return INPUT_STAGES.index(self.stage) + 1
        return len(INPUT_STAGES) + 1

    @property
    def progress(self) -> dict:
        total = len(INPUT_STAGES)
        step = self.step_number
        return {
            "step": min(step, total),
            "total": total,
            "percent": round((step - 1) / total * 100),
        }

    def _precondition_error(self, stage: WizardStage) -> Optional[str]:
        """Message blocking forward movement out of `stage`, or None."""
        if stage == WizardStage.NAME and not self.form.name.strip():
            return self.messages.missing_name
        if stage == WizardStage.MATERIALS and not self.form.materials:
            return self.messages.missing_materials
        return None

    def can_advance(self) -> bool:
        if self.stage not in INPUT_STAGES or self.stage == WizardStage.ADDITIONAL_INFO:
            return False
        return self._precondition_error(self.stage) is None

    def next_stage(self) -> bool:
        """Move one input stage forward if allowed."""
        if not self.can_advance():
            return False
        self.stage = INPUT_STAGES[INPUT_STAGES.index(self.stage) + 1]
        return True

    def previous_stage(self) -> bool:
        """Move one input stage back. Not available outside the input stages."""
        if self.stage not in INPUT_STAGES or self.stage == WizardStage.NAME:
            return False
        self.stage = INPUT_STAGES[INPUT_STAGES.index(self.stage) - 1]
        return True

    def go_to_stage(self, target: WizardStage) -> bool:
        """Jump to an input stage.

        Backward jumps always succeed; forward jumps only if every stage in
        between satisfies its precondition.
        """
        if target not in INPUT_STAGES or self.stage not in INPUT_STAGES:
            return False
        current = INPUT_STAGES.index(self.stage)
        wanted = INPUT_STAGES.index(target)
        for stage in INPUT_STAGES[current:wanted]:
            if self._precondition_error(stage) is not None:
                return False
        self.stage = target
        return True

    def handle_key(self, key: str, target_multiline: bool = False) -> bool:
        """Enter advances one stage; it is left alone inside multi-line inputs."""
        if key != ENTER_KEY or target_multiline:
            return False
        return self.next_stage()

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def validate(self):
        """Global pre-submission check.

        Raises:
            ValidationError: with the corrective message for the first problem.
        """
        validate_descriptor(self.to_descriptor(), self.vocabulary, self.messages)

    def to_descriptor(self) -> ItemDescriptor:
        """Build the ItemDescriptor for the current form values."""
        form = self.form
        plastic_code = form.plastic_code if "Plastic" in form.materials else ""
        return ItemDescriptor(
            name=form.name.strip(),
            materials=list(form.materials),
            materials_other=_optional(form.materials_other),
            plastic_code=_optional(plastic_code),
            size=_optional(form.size),
            condition=_optional(form.condition),
            has_labels=_optional(form.has_labels),
            quantity=_optional(form.quantity),
            special_features=_optional(form.special_features),
            location=_optional(form.location),
        )

    async def submit(self, service: "GuidanceService") -> Optional[GuidanceResult]:
        """Validate and run the guidance pipeline.

        Returns the GuidanceResult, or None when the submission was ignored
        (busy, wrong stage), rejected by validation, or abandoned by reset().
        """
        if self.is_loading:
            logger.info("Submission already in flight, ignoring")
            return None
        if self.stage != WizardStage.ADDITIONAL_INFO:
            logger.info(f"Submit ignored in stage {self.stage.value}")
            return None

        try:
            self.validate()
        except ValidationError as e:
            self.error = e.message
            self.stage = WizardStage.ADDITIONAL_INFO
            return None

        descriptor = self.to_descriptor()
        self._submission_id += 1
        submission_id = self._submission_id
        self.stage = WizardStage.SUBMITTING
        self.is_loading = True
        self.error = ""
        self.result = None

        try:
            result = await service.get_guidance(descriptor)
        except Exception as e:
            logger.error(f"Guidance pipeline raised: {e}")
            if submission_id == self._submission_id:
                self.stage = WizardStage.FAILED
                self.error = self.messages.submission_failed
                self.is_loading = False
            return None

        if submission_id != self._submission_id:
            logger.info("Discarding guidance for an abandoned submission")
            return None

        self.result = result
        self.stage = WizardStage.RESULT
        self.is_loading = False
        return result

    def reset(self):
        """Clear everything and return to the first stage."""
        self.form = WizardForm()
        self.stage = WizardStage.NAME
        self.error = ""
        self.result = None
        self.is_loading = False
        self._submission_id += 1

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Serialize state for API response."""
        return {
            "stage": self.stage.value,
            "progress": self.progress,
            "form": {
                "name": self.form.name,
                "materials": list(self.form.materials),
                "materials_other": self.form.materials_other,
                "plastic_code": self.form.plastic_code,
                "size": self.form.size,
                "condition": self.form.condition,
                "has_labels": self.form.has_labels,
                "quantity": self.form.quantity,
                "special_features": self.form.special_features,
                "location": self.form.location,
            },
            "error": self.error,
            "is_loading": self.is_loading,
            "result": self.result.to_json_dict() if self.result is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GuideWizard":
        """Deserialize state from API request."""
        wizard = cls()

        try:
            wizard.stage = WizardStage(data.get("stage", WizardStage.NAME.value))
        except ValueError:
            wizard.stage = WizardStage.NAME
        # An in-flight submission cannot be restored.
        if wizard.stage == WizardStage.SUBMITTING:
            wizard.stage = WizardStage.ADDITIONAL_INFO

        form_data = data.get("form", {})
        for name in TEXT_FIELDS:
            setattr(wizard.form, name, form_data.get(name) or "")
        wizard.form.materials = list(form_data.get("materials", []))

        wizard.error = data.get("error", "")
        if data.get("result") is not None:
            wizard.result = GuidanceResult.model_validate(data["result"])
        return wizard
