# studio/services/shot_breakdown.py

"""
Heuristic script -> shot list breakdown.

Splits screenplay-ish text into scenes on INT./EXT./SCENE n markers, then
classifies each line as dialogue or action with a few regexes. The result is
advisory: it is what the planner falls back to when the LLM is unavailable,
and users are expected to revise it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

SCENE_MARKER = re.compile(r"(?=\b(?:INT\.|EXT\.|SCENE \d+))", re.IGNORECASE)
ALL_CAPS_LINE = re.compile(r"^[A-Z][A-Z\s]+$")
SPEAKER = re.compile(r"^([A-Z][A-Z\s]*[A-Z])(?:\s|:|$)")
SPEAKER_PREFIX = re.compile(r"^[A-Z][A-Z\s]+:?\s*")

ESTABLISHING_DURATION = 3
ACTION_DURATION = 4
MIN_ACTION_LENGTH = 20
WORDS_PER_MINUTE = 150

WIDE_KEYWORDS = ("runs", "chase", "room")
CLOSE_UP_KEYWORDS = ("face", "eyes", "expression")


@dataclass
class BreakdownShot:
    sequence_number: int
    scene_description: str
    suggested_camera_angle: str
    suggested_duration: int
    characters_mentioned: List[int] = field(default_factory=list)
    dialogue_snippet: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "sequence_number": self.sequence_number,
            "scene_description": self.scene_description,
            "suggested_camera_angle": self.suggested_camera_angle,
            "suggested_duration": self.suggested_duration,
            "characters_mentioned": list(self.characters_mentioned),
            "dialogue_snippet": self.dialogue_snippet,
        }


def split_scenes(script_content: str) -> List[str]:
    return [s for s in SCENE_MARKER.split(script_content) if s.strip()]


def is_dialogue_line(line: str) -> bool:
    return bool(ALL_CAPS_LINE.match(line.strip())) or ":" in line


def is_action_line(line: str) -> bool:
    trimmed = line.strip()
    lowered = trimmed.lower()
    return (
        bool(trimmed)
        and not is_dialogue_line(line)
        and not trimmed.startswith("(")
        and not lowered.startswith("int.")
        and not lowered.startswith("ext.")
    )


def extract_speaker(line: str) -> Optional[str]:
    match = SPEAKER.match(line.strip())
    return match.group(1).strip() if match else None


def extract_dialogue(line: str) -> str:
    return SPEAKER_PREFIX.sub("", line.strip(), count=1).strip()


def dialogue_duration(dialogue: str) -> int:
    word_count = len(dialogue.split(" "))
    return max(2, round(word_count / WORDS_PER_MINUTE * 60))


def action_shot_angle(action_line: str) -> str:
    action = action_line.lower()
    if any(k in action for k in WIDE_KEYWORDS):
        return "wide"
    if any(k in action for k in CLOSE_UP_KEYWORDS):
        return "close-up"
    return "medium"


def _characters_in(text: str, characters: Sequence) -> List[int]:
    lowered = text.lower()
    return [
        c.id for c in characters
        if c.id is not None and c.name and c.name.lower() in lowered
    ]


def _scene_description(lines: List[str]) -> str:
    setup = " ".join(lines[1:3]).strip()
    return setup or "the scene"


def _follows_bare_cue(lines: List[str], position: int) -> bool:
    return position > 0 and bool(ALL_CAPS_LINE.match(lines[position - 1].strip()))


def _dialogue_for(line: str, lines: List[str], position: int) -> str:
    """Dialogue on the cue line itself, or on the line after a bare cue."""
    text = extract_dialogue(line)
    if text:
        return text
    if position + 1 < len(lines) and not is_dialogue_line(lines[position + 1]):
        return lines[position + 1].strip()
    return ""


def shot_priority(shot: BreakdownShot) -> int:
    priority = 1
    if shot.suggested_camera_angle == "wide":
        priority += 2
    if shot.suggested_camera_angle == "close-up":
        priority += 1
    if shot.dialogue_snippet:
        priority += 1
    if shot.suggested_duration > 5:
        priority += 1
    return priority


def optimize_shot_count(shots: List[BreakdownShot], target_count: int) -> List[BreakdownShot]:
    if len(shots) <= target_count:
        return shots

    # sorted() is stable, so equal priorities keep script order
    kept = sorted(shots, key=shot_priority, reverse=True)[:target_count]
    return sorted(kept, key=lambda s: s.sequence_number)


def break_script_into_shots(
    script_content: str,
    characters: Iterable = (),
    *,
    target_shot_count: int = 20,
    include_character_close_ups: bool = True,
) -> List[BreakdownShot]:
    characters = list(characters)
    shots: List[BreakdownShot] = []
    sequence_number = 1

    for scene in split_scenes(script_content):
        lines = [line for line in scene.split("\n") if line.strip()]
        if not lines:
            continue

        header = lines[0].strip()

        shots.append(
            BreakdownShot(
                sequence_number=sequence_number,
                scene_description=f"{header} - Establishing shot showing {_scene_description(lines)}",
                suggested_camera_angle="wide",
                suggested_duration=ESTABLISHING_DURATION,
                characters_mentioned=_characters_in(scene, characters),
            )
        )
        sequence_number += 1

        for position, line in enumerate(lines):
            if _follows_bare_cue(lines, position):
                continue
            if is_action_line(line) and len(line) > MIN_ACTION_LENGTH:
                shots.append(
                    BreakdownShot(
                        sequence_number=sequence_number,
                        scene_description=line.strip(),
                        suggested_camera_angle=action_shot_angle(line),
                        suggested_duration=ACTION_DURATION,
                        characters_mentioned=_characters_in(line, characters),
                    )
                )
                sequence_number += 1

        if not include_character_close_ups:
            continue

        current_speaker = None
        dialogue_index = 0
        for position, line in enumerate(lines):
            if not is_dialogue_line(line):
                continue
            index = dialogue_index
            dialogue_index += 1

            speaker = extract_speaker(line)
            if not speaker or speaker == current_speaker:
                continue
            current_speaker = speaker

            character = next(
                (c for c in characters if c.name and c.name.lower() == speaker.lower()),
                None,
            )
            if character is None:
                continue

            dialogue = _dialogue_for(line, lines, position)
            shots.append(
                BreakdownShot(
                    sequence_number=sequence_number,
                    scene_description=f"{speaker} speaking: {dialogue}",
                    suggested_camera_angle="medium" if index < 2 else "close-up",
                    suggested_duration=dialogue_duration(dialogue),
                    characters_mentioned=[character.id] if character.id is not None else [],
                    dialogue_snippet=dialogue or None,
                )
            )
            sequence_number += 1

    return optimize_shot_count(shots, target_shot_count)
