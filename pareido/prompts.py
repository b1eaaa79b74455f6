"""
Prompt text for Gemini — analysis, merge, and card artwork.

The JSON contract in ANALYSIS_PROMPT and MERGE_PROMPT is what analyzer.py and
merger.py parse. Materials come back raw and are normalized afterwards, so the
"sum between 10 and 20" line is a hint to the model, not a guarantee.
"""

_MATERIALS_SECTION = """
3. "materials": An object containing exactly these 5 keys with integer values. The total sum of all material counts must be between 10 and 20. Assign values based on the visual prominence of these textures:

   - "metal": (Circuit boards, copper wire, server racks, rusty chassis)
     -> Archetype: Hardware Golems, corrupt database guardians.
   - "synthetic": (Plastics, translucent resin, LEDs, screens, cables, shrink-wrap)
     -> Archetype: Glitch-Punks, entities made of light and plastic waste.
   - "stone": (Brutalist concrete, asphalt, ceramic fragments, processor silicon)
     -> Archetype: Urban Elementals, spirits of the "Old Web" ruins.
   - "organic": (Moss, mold, flowers, flesh, slime, overgrowth)
     -> Archetype: Bio-Hackers, "Wetware" druids, floral infections.
   - "fabric": (Mesh, shielding, discarded fashion, fiber optics, dust)
     -> Archetype: Ghost data, spectral figures draped in static.
"""

ANALYSIS_PROMPT = """
You are an AI Archivist for a corrupted digital-biological ecosystem.
Your task is to analyze an image of an object or environment and generate a "Symbiote" (a character born from the fusion of nature, trash, and code) based on it.

Analyze the image through the lens of "Techno-Naturalism": biological growth consumes technology, and digital glitches bleed into physical reality.

Return a JSON object with the following fields:
1. "name": A creative name for the entity (e.g., "Null-Root Dryad", "Server-Farm Fungi", "Blue-Screen Bloom", "Heatsink Hermit", "Polymer-Petal Construct").

2. "creativityScore": A number between 0 and 100 representing how uncannily the generation blends the digital and the organic.
""" + _MATERIALS_SECTION + """
4. "prompt_for_image_generation": One or two sentences describing how the Symbiote should look and move when drawn on a collectible card.

Return ONLY valid JSON, no explanation or markdown."""

MERGE_PROMPT = """
You are an AI Archivist for a corrupted digital-biological ecosystem.
Two Symbiotes are being fused. You will receive the name and image of each.

Invent the single new entity that results from the fusion. It must inherit visible traits from both parents.

Return a JSON object with the following fields:
1. "name": A creative name for the fused entity.

2. "creativityScore": A number between 0 and 100 representing how uncannily the fusion blends its parents.
""" + _MATERIALS_SECTION + """
Return ONLY valid JSON, no explanation or markdown."""


def build_card_prompt(analysis: dict) -> str:
    """Artwork prompt for a freshly analyzed Symbiote."""
    name = analysis.get("name", "Unknown Symbiote")
    score = analysis.get("creativityScore", 0)
    suggestion = analysis.get("prompt_for_image_generation") or ""
    prompt = (
        "Create an animated creative gaming card from the attached image"
        f' and add this name "{name}" at the top and replace "LVL" with this number "{score}".'
        " Output should be a high-quality gaming card image, hearthstone-like."
        " Do not add description below image."
    )
    if suggestion:
        prompt += f" Also use this suggestion prompt for animating the object: {suggestion}"
    return prompt


def build_merge_card_prompt(name1: str, name2: str, creativity_score: int) -> str:
    """Artwork prompt for a card produced by merging two cards."""
    return f"""
Merge these two cards into a single unified gaming card. Create a new unique personage that combines elements from both cards.
Blend visual and conceptual traits of "{name1}" and "{name2}" into a cohesive Hearthstone-like character.
The card should have a diamond-shaped gem at the bottom and be high-quality with animated elements.
Do not add description text, only the animated personage on the card.
Replace number at the top left corner with {creativity_score}.
"""
