"""Item Descriptor Builder.

Turns an ItemDescriptor into the line-oriented ITEM DETAILS block that is
embedded in the guidance prompt. Line order is fixed; absent fields produce no
line at all.
"""

import logging
from typing import Optional

from ezrecycle.models import ItemDescriptor

logger = logging.getLogger(__name__)


# (label, attribute) in output order. Materials is handled separately because
# it joins a list and carries the materials_other suffix.
_TRAILING_FIELDS = [
    ("Plastic type/recycling code", "plastic_code"),
    ("Size", "size"),
    ("Condition", "condition"),
    ("Recycling labels/symbols present", "has_labels"),
    ("Quantity", "quantity"),
    ("Special features/concerns", "special_features"),
    ("User Location", "location"),
]


def _clean(value: Optional[str]) -> Optional[str]:
    """Stripped value, or None when absent or whitespace-only."""
    if value is None:
        return None
    return value.strip() or None


def build_description(descriptor: ItemDescriptor) -> str:
    """Serialize an item descriptor into the prompt's ITEM DETAILS text.

    Args:
        descriptor: The item facts collected by the wizard.

    Returns:
        Newline-joined lines, no trailing newline. With only `name` set the
        result is exactly "Item: <name>".
    """
    lines = [f"Item: {descriptor.name}"]

    if descriptor.materials:
        materials_line = f"Materials: {', '.join(descriptor.materials)}"
        materials_other = _clean(descriptor.materials_other)
        if materials_other is not None:
            materials_line += f" ({materials_other})"
        lines.append(materials_line)

    for label, attr in _TRAILING_FIELDS:
        value = _clean(getattr(descriptor, attr))
        if value is not None:
            lines.append(f"{label}: {value}")

    description = "\n".join(lines)
    logger.debug(f"Built item description ({len(lines)} lines):\n{description}")
    return description
