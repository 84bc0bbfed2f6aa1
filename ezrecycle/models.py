"""Pydantic schemas for the recycling guidance pipeline."""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ========================================
# Input Schemas
# ========================================

class ItemDescriptor(BaseModel):
    """User-supplied facts about one physical item.

    Only `name` is required. The builder does not validate anything; the
    wizard is responsible for rejecting empty names and unknown vocabulary.
    """
    name: str = Field(..., description="Item name/description (e.g., 'water bottle')")
    materials: list[str] = Field(default_factory=list, description="Selected materials, in selection order")
    materials_other: Optional[str] = Field(None, description="Free-text material detail (e.g., 'steel')")
    plastic_code: Optional[str] = Field(None, description="Plastic recycling code (e.g., '#1 PET')")
    size: Optional[str] = Field(None, description="Size class from the size vocabulary")
    condition: Optional[str] = Field(None, description="Condition from the condition vocabulary")
    has_labels: Optional[str] = Field(None, description="Recycling labels/symbols visible on the item")
    quantity: Optional[str] = Field(None, description="Free-text quantity (e.g., 'a bag full')")
    special_features: Optional[str] = Field(None, description="Special features or concerns")
    location: Optional[str] = Field(None, description="User location (city or ZIP code)")


# ========================================
# Guidance Result Schemas
# ========================================
# Field names mirror the JSON schema requested from the oracle (camelCase
# aliases). Leaf values are kept exactly as the oracle sent them: a reply with
# "tips": "one tip" or "recyclability": true is still a usable result. Every
# key is optional, so consumers must check `is not None` before reading.

_RESULT_CONFIG = ConfigDict(
    populate_by_name=True,
    extra="allow",
    frozen=True,
)


class Analysis(BaseModel):
    model_config = _RESULT_CONFIG

    item: Any = None
    material: Any = None
    recyclability: Any = None
    recycling_code: Any = Field(None, alias="recyclingCode")


class Instructions(BaseModel):
    model_config = _RESULT_CONFIG

    method: Any = None
    preparation: Any = None
    location: Any = None
    timing: Any = None


class Alternatives(BaseModel):
    model_config = _RESULT_CONFIG

    reuse: Any = None
    donation: Any = None
    upcycling: Any = None
    repair: Any = None


class GuidanceResult(BaseModel):
    """Canonical recycling guidance handed to the presentation layer.

    Produced either from a parsed oracle reply or as the degraded fallback;
    both satisfy the same shape. Immutable once built.
    """
    model_config = _RESULT_CONFIG

    # An object becomes the typed section; any other JSON value is kept raw.
    analysis: Union[Analysis, Any] = Field(None, union_mode="left_to_right")
    instructions: Union[Instructions, Any] = Field(None, union_mode="left_to_right")
    warnings: Any = None
    environmental_impact: Any = Field(None, alias="environmentalImpact")
    alternatives: Union[Alternatives, Any] = Field(None, union_mode="left_to_right")
    tips: Any = None
    related_items: Any = Field(None, alias="relatedItems")

    def to_json_dict(self) -> dict:
        """Serialize back to the oracle's camelCase JSON, dropping absent keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ========================================
# API Schemas
# ========================================

class OptionsResponse(BaseModel):
    materials: list[str]
    plastic_codes: list[dict]
    sizes: list[str]
    conditions: list[str]


class ValidationErrorResponse(BaseModel):
    detail: str
    field: Optional[str] = None
