"""Pin guidance prompt structure (semantic checks, not byte-exact)."""

import pytest

from ezrecycle.prompts import GUIDANCE_PROMPT_TEMPLATE, GUIDANCE_SCHEMA_KEYS, compile_prompt


class TestGuidancePrompt:

    @pytest.fixture(scope="class")
    def prompt(self):
        return compile_prompt("Item: water bottle\nMaterials: Plastic")

    def test_embeds_description_verbatim(self, prompt):
        assert "ITEM DETAILS:\nItem: water bottle\nMaterials: Plastic\n" in prompt

    def test_declares_every_schema_key(self, prompt):
        for key in GUIDANCE_SCHEMA_KEYS:
            assert f'"{key}"' in prompt

    def test_schema_keys_match_result_model(self):
        assert GUIDANCE_SCHEMA_KEYS == (
            "analysis", "instructions", "warnings", "environmentalImpact",
            "alternatives", "tips", "relatedItems",
        )

    def test_has_guidelines_sections(self, prompt):
        assert "ANALYSIS GUIDELINES:" in prompt
        assert "IMPORTANT NOTES:" in prompt

    def test_forbids_prose(self, prompt):
        assert prompt.rstrip().endswith(
            "Respond ONLY with valid JSON, no additional text nor formatting "
            "(example: do not include Markdown bolding)."
        )

    def test_schema_braces_are_literal(self, prompt):
        assert "{{" not in prompt
        assert '"analysis": {' in prompt

    def test_single_substitution_point(self):
        assert GUIDANCE_PROMPT_TEMPLATE.count("{item_details}") == 1


class TestCompilePrompt:
    def test_is_deterministic(self):
        assert compile_prompt("Item: cup") == compile_prompt("Item: cup")

    def test_braces_in_description_are_not_interpreted(self):
        prompt = compile_prompt("Item: box {size}")
        assert "Item: box {size}" in prompt

    def test_only_description_varies(self):
        a = compile_prompt("Item: cup")
        b = compile_prompt("Item: plate")
        assert a.replace("Item: cup", "") == b.replace("Item: plate", "")
