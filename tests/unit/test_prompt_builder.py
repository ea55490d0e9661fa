from __future__ import annotations

from src.app.domain.models import PreferenceProfile
from src.app.services.prompt_builder import MODIFICATION_SYSTEM_PROMPT, build_modification_prompt
from tests.stubs import VALID_RECIPE_TEXT, vegan_profile


class TestBuildModificationPrompt:
    def test_is_deterministic(self) -> None:
        profile = vegan_profile()
        assert build_modification_prompt(VALID_RECIPE_TEXT, profile) == build_modification_prompt(
            VALID_RECIPE_TEXT, profile
        )

    def test_sections_in_order(self) -> None:
        prompt = build_modification_prompt(VALID_RECIPE_TEXT, vegan_profile())

        assert prompt.startswith("Please modify the following recipe")
        preferences = prompt.index("DIETARY PREFERENCES:")
        recipe = prompt.index("ORIGINAL RECIPE:\n" + VALID_RECIPE_TEXT)
        instructions = prompt.index("INSTRUCTIONS:")
        assert preferences < recipe < instructions
        assert prompt.endswith("Please provide the modified recipe in a clear, structured format.")

    def test_preference_lines_in_fixed_order(self) -> None:
        profile = PreferenceProfile(
            user_id="user-a",
            diet_type="vegetarian",
            daily_calorie_requirement=1800,
            allergies="nuts",
            food_intolerances="lactose",
            preferred_cuisines="italian",
            excluded_ingredients="mushrooms",
            macro_distribution_protein=30,
            macro_distribution_fats=25,
            macro_distribution_carbohydrates=45,
        )

        prompt = build_modification_prompt(VALID_RECIPE_TEXT, profile)

        expected = "\n".join(
            [
                "DIETARY PREFERENCES:",
                "Diet type: vegetarian",
                "Target daily calories: 1800",
                "Allergies: nuts",
                "Food intolerances: lactose",
                "Preferred cuisines: italian",
                "Ingredients to avoid: mushrooms",
                "Macro distribution: Protein: 30%, Fats: 25%, Carbohydrates: 45%",
            ]
        )
        assert expected in prompt

    def test_missing_fields_are_omitted(self) -> None:
        prompt = build_modification_prompt(VALID_RECIPE_TEXT, vegan_profile())

        assert "Diet type: vegan" in prompt
        assert "Allergies: peanuts" in prompt
        assert "Food intolerances" not in prompt
        assert "Preferred cuisines" not in prompt
        assert "Macro distribution" not in prompt

    def test_partial_macros(self) -> None:
        profile = PreferenceProfile(user_id="user-a", macro_distribution_fats=20)
        assert "Macro distribution: Fats: 20%" in build_modification_prompt(VALID_RECIPE_TEXT, profile)

    def test_empty_profile_still_builds(self) -> None:
        prompt = build_modification_prompt(VALID_RECIPE_TEXT, PreferenceProfile(user_id="user-a"))
        assert "DIETARY PREFERENCES:" in prompt
        assert "Diet type" not in prompt


class TestSystemPrompt:
    def test_mentions_role(self) -> None:
        assert "nutritionist" in MODIFICATION_SYSTEM_PROMPT
