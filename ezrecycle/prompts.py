"""LLM prompt templates for the recycling guidance advisor."""

# Top-level keys the oracle is asked to return. The interpreter and the
# GuidanceResult model are kept in sync with this list.
GUIDANCE_SCHEMA_KEYS = (
    "analysis",
    "instructions",
    "warnings",
    "environmentalImpact",
    "alternatives",
    "tips",
    "relatedItems",
)

GUIDANCE_PROMPT_TEMPLATE = """You are an expert recycling advisor with extensive knowledge of materials, recycling processes, and waste management. Analyze the following detailed item information and provide comprehensive recycling guidance.

ITEM DETAILS:
{item_details}

Based on this detailed information, please provide a response in the following JSON format:
{{
  "analysis": {{
    "item": "specific item name based on description",
    "material": "primary material type (be specific)",
    "recyclability": "Yes/No/Special handling required",
    "recyclingCode": "if applicable (e.g., #1-7 for plastics)"
  }},
  "instructions": {{
    "method": "Curbside/Drop-off/Special program/Retailer take-back/Not recyclable",
    "preparation": [
      "detailed step-by-step preparation instructions based on condition and materials",
      "each string is a separate step"
    ],
    "location": "specific guidance on where to take it",
    "timing": "any timing considerations if applicable (e.g., collection days, seasonal programs)"
  }},
  "warnings": [
    "important safety warnings",
    "contamination concerns",
    "what NOT to do"
  ],
  "environmentalImpact": "detailed explanation of why proper disposal matters and environmental benefits",
  "alternatives": {{
    "reuse": ["creative reuse suggestions based on condition and materials."],
    "donation": "donation options if item is functional, including specific organizations.",
    "upcycling": ["specific DIY project ideas based on materials."],
    "repair": "repair options if item is broken but fixable."
  }},
  "tips": [
    "material-specific recycling tips",
    "how to identify similar items in the future",
    "prevention/reduction suggestions"
  ],
  "relatedItems": [
    "similar items that follow the same disposal process"
  ]
}}

ANALYSIS GUIDELINES:
- Use the detailed material information to provide precise recycling guidance
- Consider the item's condition when recommending disposal methods
- If multiple materials are present, address each one specifically
- Factor in size and quantity for practical disposal advice
- Address any special features or concerns mentioned
- Provide location-specific guidance when possible
- Be extremely specific about preparation steps
- Include safety warnings for any hazardous materials
- Prioritize environmental impact and proper disposal
- Consider the full lifecycle of the item

IMPORTANT NOTES:
- If the item contains mixed materials, provide guidance for each component
- If recycling codes are mentioned, use them to provide specific plastic recycling guidance
- Consider contamination issues based on the item's condition
- Provide alternatives when recycling isn't the best option
- Be educational about why certain disposal methods are recommended

Respond ONLY with valid JSON, no additional text nor formatting (example: do not include Markdown bolding)."""


def compile_prompt(description: str) -> str:
    """Embed an item description into the guidance prompt template."""
    return GUIDANCE_PROMPT_TEMPLATE.format(item_details=description)
