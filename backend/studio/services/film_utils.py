from typing import Iterable, Optional, Sequence

WORDS_PER_SCRIPT_MINUTE = 250


def generate_character_reference(character) -> str:
    traits = ", ".join(character.personality_traits or [])
    visual = getattr(character, "visual_description", None) or character.description or ""
    backstory = getattr(character, "backstory", None) or ""
    return f"{character.name}: {visual}. Personality: {traits}. {backstory}".strip()


def character_portrait_prompt(
    name: str,
    description: str,
    visual_description: str,
    personality_traits: Sequence[str] = (),
    backstory: Optional[str] = None,
) -> str:
    lines = [
        f"Professional character portrait: {visual_description}.",
        f"Character name: {name}.",
        f"Character description: {description}.",
    ]
    if personality_traits:
        lines.append(f"Personality: {', '.join(personality_traits)}.")
    if backstory:
        lines.append(f"Background: {backstory}")
    lines.append("")
    lines.append(
        "High quality portrait, cinematic lighting, professional photography, "
        "character study, consistent appearance for film production."
    )
    return "\n".join(lines)


def build_consistency_prompt(
    scene_description: str,
    characters: Iterable,
    camera_angle: Optional[str] = None,
    camera_movement: Optional[str] = None,
    scene_context: Optional[str] = None,
) -> str:
    """
    Shot prompt that restates every on-screen character's reference description,
    so successive renders keep the same faces and wardrobe.
    """
    descriptions = "\n".join(generate_character_reference(c) for c in characters)
    direction = f"Shot as {camera_angle} angle" if camera_angle else ""
    movement = f"with {camera_movement} camera movement" if camera_movement else ""

    return (
        f"{scene_description}\n\n"
        f"Characters in shot:\n{descriptions}\n\n"
        f"{direction} {movement}. {scene_context or ''}\n\n"
        "Cinematic, professional lighting, film quality."
    )


def calculate_project_duration(shots: Iterable) -> int:
    return sum(shot.duration_seconds or 0 for shot in shots)


def estimate_script_duration(script_content: str) -> int:
    """Seconds of screen time, at roughly one page (250 words) per minute."""
    word_count = len(script_content.split())
    return round(word_count / WORDS_PER_SCRIPT_MINUTE * 60)


def extract_script_title(script_content: str) -> Optional[str]:
    for line in script_content.split("\n")[:10]:
        line = line.strip()
        if 0 < len(line) < 50 and not line.startswith(("INT.", "EXT.")):
            return line
    return None


def compute_script_metadata(content: str, characters: Iterable) -> dict:
    lowered = content.lower()
    character_count = len({
        c.id for c in characters
        if c.name and c.name.lower() in lowered
    })
    # whole minutes only: 249 words is still zero
    word_count = content.count(" ") + 1
    estimated_duration = (word_count // WORDS_PER_SCRIPT_MINUTE) * 60
    return {
        "character_count": character_count,
        "estimated_duration": estimated_duration,
    }
