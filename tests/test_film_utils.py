from types import SimpleNamespace

from studio.services.film_utils import (
    build_consistency_prompt,
    calculate_project_duration,
    character_portrait_prompt,
    compute_script_metadata,
    estimate_script_duration,
    extract_script_title,
    generate_character_reference,
)

ALICE = SimpleNamespace(
    id=1,
    name="Alice",
    description="A courier",
    visual_description="short silver hair, red raincoat",
    personality_traits=["stubborn", "loyal"],
    backstory="Grew up on the docks.",
)


def test_character_reference_prefers_visual_description() -> None:
    ref = generate_character_reference(ALICE)
    assert ref.startswith("Alice: short silver hair, red raincoat.")
    assert "stubborn, loyal" in ref


def test_consistency_prompt_lists_every_character() -> None:
    bob = SimpleNamespace(id=2, name="Bob", description="A fisherman", personality_traits=[])
    prompt = build_consistency_prompt("They argue on the pier", [ALICE, bob], "wide", "pan")

    assert prompt.startswith("They argue on the pier")
    assert "Alice: short silver hair" in prompt
    assert "Bob: A fisherman" in prompt
    assert "Shot as wide angle with pan camera movement" in prompt


def test_portrait_prompt_includes_traits_and_backstory() -> None:
    prompt = character_portrait_prompt("Alice", "A courier", "red raincoat", ["loyal"], "Docks.")
    assert "Professional character portrait: red raincoat." in prompt
    assert "Personality: loyal." in prompt
    assert "Background: Docks." in prompt


def test_project_duration_ignores_missing_durations() -> None:
    shots = [SimpleNamespace(duration_seconds=5), SimpleNamespace(duration_seconds=None), SimpleNamespace(duration_seconds=3)]
    assert calculate_project_duration(shots) == 8


def test_estimate_script_duration_rounds() -> None:
    assert estimate_script_duration(" ".join(["word"] * 500)) == 120
    assert estimate_script_duration(" ".join(["word"] * 125)) == 30


def test_extract_script_title_skips_scene_headers() -> None:
    assert extract_script_title("\nINT. HOUSE - DAY\nThe Last Ferry\n") == "The Last Ferry"
    assert extract_script_title("INT. HOUSE - DAY\n" + "x" * 80) is None


def test_script_metadata_counts_named_characters_and_whole_minutes() -> None:
    bob = SimpleNamespace(id=2, name="Bob")
    zed = SimpleNamespace(id=3, name="Zed")

    short = compute_script_metadata("ALICE meets BOB at the pier.", [ALICE, bob, zed])
    assert short == {"character_count": 2, "estimated_duration": 0}

    long = compute_script_metadata(" ".join(["word"] * 520), [ALICE])
    assert long == {"character_count": 0, "estimated_duration": 120}
