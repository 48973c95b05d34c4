from types import SimpleNamespace

from studio.services.shot_breakdown import (
    action_shot_angle,
    break_script_into_shots,
    dialogue_duration,
    extract_speaker,
    is_dialogue_line,
    split_scenes,
)

SCRIPT = """INT. KITCHEN - NIGHT
Rain hammers the window.
ALICE
We have to leave tonight.
BOB: Not without the map.
Alice runs across the room to grab her coat.

EXT. STREET - CONTINUOUS
Headlights sweep over the wet pavement.
"""

CHARACTERS = [
    SimpleNamespace(id=1, name="Alice"),
    SimpleNamespace(id=2, name="Bob"),
]


def test_split_scenes_on_int_and_ext_headers() -> None:
    scenes = split_scenes(SCRIPT)
    assert len(scenes) == 2
    assert scenes[0].startswith("INT. KITCHEN")
    assert scenes[1].startswith("EXT. STREET")


def test_split_scenes_does_not_split_inside_words() -> None:
    assert len(split_scenes("PRINT. this is not a header\nMINT.")) == 1


def test_every_scene_opens_with_wide_establishing_shot() -> None:
    shots = break_script_into_shots(SCRIPT, CHARACTERS)

    establishing = [s for s in shots if "Establishing shot" in s.scene_description]
    assert [s.sequence_number for s in establishing] == [1, 6]
    assert all(s.suggested_camera_angle == "wide" for s in establishing)
    assert all(s.suggested_duration == 3 for s in establishing)
    assert establishing[0].scene_description.startswith("INT. KITCHEN - NIGHT - Establishing shot showing ")
    assert establishing[0].characters_mentioned == [1, 2]
    assert establishing[1].characters_mentioned == []


def test_action_and_dialogue_shots() -> None:
    shots = break_script_into_shots(SCRIPT, CHARACTERS)
    by_seq = {s.sequence_number: s for s in shots}

    assert len(shots) == 7
    assert by_seq[2].scene_description == "Rain hammers the window."
    assert by_seq[2].suggested_camera_angle == "medium"
    assert by_seq[3].suggested_camera_angle == "wide"  # "runs" / "room"
    assert by_seq[3].suggested_duration == 4

    assert by_seq[4].scene_description == "ALICE speaking: We have to leave tonight."
    assert by_seq[4].dialogue_snippet == "We have to leave tonight."
    assert by_seq[4].characters_mentioned == [1]
    assert by_seq[5].dialogue_snippet == "Not without the map."
    assert by_seq[5].suggested_camera_angle == "medium"


def test_close_ups_can_be_disabled() -> None:
    shots = break_script_into_shots(SCRIPT, CHARACTERS, include_character_close_ups=False)
    assert all(s.dialogue_snippet is None for s in shots)
    assert len(shots) == 5


def test_unknown_speakers_get_no_dialogue_shot() -> None:
    shots = break_script_into_shots(SCRIPT, [])
    assert all(s.dialogue_snippet is None for s in shots)


def test_target_count_keeps_highest_priority_in_script_order() -> None:
    shots = break_script_into_shots(SCRIPT, CHARACTERS, target_shot_count=3)
    assert [s.sequence_number for s in shots] == [1, 3, 6]


def test_third_dialogue_line_becomes_close_up() -> None:
    script = "INT. OFFICE - DAY\nALICE: One.\nBOB: Two.\nALICE: Three, finally.\n"
    shots = break_script_into_shots(script, CHARACTERS)
    dialogue = [s for s in shots if s.dialogue_snippet]
    assert [s.suggested_camera_angle for s in dialogue] == ["medium", "medium", "close-up"]


def test_line_classifiers() -> None:
    assert is_dialogue_line("ALICE")
    assert is_dialogue_line("Bob: hi")
    assert not is_dialogue_line("She walks in.")
    assert extract_speaker("BOB: Not without the map.") == "BOB"
    assert extract_speaker("quiet line") is None
    assert action_shot_angle("Tears well in her eyes") == "close-up"
    assert action_shot_angle("A car chase erupts") == "wide"
    assert action_shot_angle("He sits down") == "medium"
    assert dialogue_duration("Hi") == 2
    assert dialogue_duration(" ".join(["word"] * 300)) == 120


def test_empty_script_yields_no_shots() -> None:
    assert break_script_into_shots("   \n\n") == []
