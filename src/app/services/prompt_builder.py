from __future__ import annotations

from src.app.domain.models import PreferenceProfile

MODIFICATION_SYSTEM_PROMPT = """You are a professional nutritionist and chef assistant specializing in recipe modifications.
Your task is to modify recipes according to specific dietary preferences and restrictions.

Guidelines:
- Maintain the essence and flavor profile of the original recipe
- Suggest appropriate ingredient substitutions based on dietary restrictions
- Adjust portion sizes and nutritional content as needed
- Provide clear, practical cooking instructions
- Ensure the modified recipe is safe and nutritionally balanced
- If a modification is not possible or safe, explain why and suggest alternatives

Always respond with a complete, modified recipe in a clear, structured format."""

_INSTRUCTIONS = """INSTRUCTIONS:
1. Modify the recipe to accommodate all dietary restrictions and preferences
2. Suggest ingredient substitutions where necessary
3. Adjust portions if needed to meet calorie requirements
4. Ensure the recipe remains practical and delicious
5. Provide the complete modified recipe with ingredients list and cooking instructions
6. If any modification is not possible, explain why and suggest alternatives

Please provide the modified recipe in a clear, structured format."""


def _preference_lines(profile: PreferenceProfile) -> list[str]:
    lines: list[str] = []

    if profile.diet_type:
        lines.append(f"Diet type: {profile.diet_type}")
    if profile.daily_calorie_requirement:
        lines.append(f"Target daily calories: {profile.daily_calorie_requirement}")
    if profile.allergies:
        lines.append(f"Allergies: {profile.allergies}")
    if profile.food_intolerances:
        lines.append(f"Food intolerances: {profile.food_intolerances}")
    if profile.preferred_cuisines:
        lines.append(f"Preferred cuisines: {profile.preferred_cuisines}")
    if profile.excluded_ingredients:
        lines.append(f"Ingredients to avoid: {profile.excluded_ingredients}")

    macros: list[str] = []
    if profile.macro_distribution_protein:
        macros.append(f"Protein: {profile.macro_distribution_protein}%")
    if profile.macro_distribution_fats:
        macros.append(f"Fats: {profile.macro_distribution_fats}%")
    if profile.macro_distribution_carbohydrates:
        macros.append(f"Carbohydrates: {profile.macro_distribution_carbohydrates}%")
    if macros:
        lines.append(f"Macro distribution: {', '.join(macros)}")

    return lines


def build_modification_prompt(recipe_text: str, profile: PreferenceProfile) -> str:
    """Same recipe text and profile always yield the same prompt."""
    sections = [
        "Please modify the following recipe according to these dietary preferences and restrictions:",
        "DIETARY PREFERENCES:\n" + "\n".join(_preference_lines(profile)),
        f"ORIGINAL RECIPE:\n{recipe_text}",
        _INSTRUCTIONS,
    ]
    return "\n\n".join(sections)
