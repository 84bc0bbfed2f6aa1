"""Shared fixtures for the EzRecycle test suite.

Loads the REAL packaged config (ezrecycle/config.yaml) — pins actual vocabulary.
The Gemini SDK is always mocked; no test touches the network.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from ezrecycle.config_loader import get_config
from ezrecycle.logic.interpreter import degraded_result
from ezrecycle.logic.wizard import GuideWizard, WizardStage
from ezrecycle.models import GuidanceResult, ItemDescriptor


# =============================================================================
# CONFIG FIXTURES
# =============================================================================

@pytest.fixture
def config():
    """Load real GuidanceConfig from the packaged config.yaml (not mocked)."""
    return get_config()


# =============================================================================
# DESCRIPTOR FIXTURES
# =============================================================================

@pytest.fixture
def water_bottle():
    """ItemDescriptor: water bottle, Plastic, #1 PET."""
    return ItemDescriptor(name="water bottle", materials=["Plastic"], plastic_code="#1 PET")


@pytest.fixture
def full_descriptor():
    """ItemDescriptor with every field populated."""
    return ItemDescriptor(
        name="old laptop",
        materials=["Electronics", "Battery", "Metal (Other)"],
        materials_other="aluminium casing",
        plastic_code="#7 Other",
        size="Medium (size of a book)",
        condition="Broken but intact",
        has_labels="WEEE crossed-out bin",
        quantity="1",
        special_features="contains lithium battery",
        location="Portland, OR",
    )


# =============================================================================
# ORACLE REPLY FIXTURES
# =============================================================================

@pytest.fixture
def guidance_dict():
    """A complete guidance object as the oracle is asked to return it."""
    return {
        "analysis": {
            "item": "plastic water bottle",
            "material": "PET plastic",
            "recyclability": "Yes",
            "recyclingCode": "#1",
        },
        "instructions": {
            "method": "Curbside",
            "preparation": ["Empty the bottle", "Rinse it", "Replace the cap"],
            "location": "Household recycling bin",
            "timing": "Weekly collection",
        },
        "warnings": ["Do not bag recyclables"],
        "environmentalImpact": "Recycled PET saves energy compared to virgin plastic.",
        "alternatives": {
            "reuse": ["Refill with water"],
            "donation": "Not applicable",
            "upcycling": ["Self-watering planter"],
            "repair": "Not applicable",
        },
        "tips": ["Check the number inside the triangle"],
        "relatedItems": ["soda bottles", "juice bottles"],
    }


@pytest.fixture
def guidance_reply(guidance_dict):
    """Oracle reply: the guidance JSON wrapped in chatty prose."""
    return f"Sure! Here is the analysis:\n{json.dumps(guidance_dict)}\nHope that helps!"


# =============================================================================
# SDK / SERVICE MOCKS
# =============================================================================

def _make_genai_response(text: str):
    response = MagicMock()
    response.text = text
    response.usage_metadata.prompt_token_count = 120
    response.usage_metadata.candidates_token_count = 340
    return response


@pytest.fixture
def make_genai_response():
    return _make_genai_response


@pytest.fixture
def mock_genai_client():
    """A google.genai.Client stand-in whose async generate_content is an AsyncMock."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=_make_genai_response("{}"))
    return client


class FakeGuidanceService:
    """GuidanceService stand-in: records descriptors, returns a fixed result."""

    def __init__(self, result: GuidanceResult = None, error: Exception = None):
        self.result = result if result is not None else degraded_result("fake")
        self.error = error
        self.calls: list[ItemDescriptor] = []

    async def get_guidance(self, descriptor: ItemDescriptor) -> GuidanceResult:
        self.calls.append(descriptor)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_service_cls():
    """The FakeGuidanceService class, for tests that subclass or configure it."""
    return FakeGuidanceService


@pytest.fixture
def fake_service(guidance_dict):
    return FakeGuidanceService(GuidanceResult.model_validate(guidance_dict))


# =============================================================================
# WIZARD FIXTURES
# =============================================================================

@pytest.fixture
def wizard():
    """Fresh GuideWizard at the first stage."""
    return GuideWizard()


@pytest.fixture
def ready_wizard():
    """GuideWizard at ADDITIONAL_INFO with a valid name and material."""
    wizard = GuideWizard()
    wizard.set_field("name", "water bottle")
    wizard.toggle_material("Plastic")
    wizard.set_field("plastic_code", "#1 PET")
    wizard.go_to_stage(WizardStage.ADDITIONAL_INFO)
    assert wizard.stage == WizardStage.ADDITIONAL_INFO
    return wizard
