# studio/services/llm.py

from __future__ import annotations

import base64
import json
import logging
from typing import List, Optional, Sequence

from google import genai
from google.genai import types

from studio.core.config import settings
from studio.core.errors import UpstreamError
from studio.services.film_utils import estimate_script_duration, extract_script_title
from studio.services.shot_breakdown import BreakdownShot, break_script_into_shots

logger = logging.getLogger(__name__)

# Leading base64 bytes of the common image containers.
MIME_SIGNATURES = (
    ("/9j/", "image/jpeg"),
    ("iVBORw0KGgo", "image/png"),
    ("R0lGODlh", "image/gif"),
    ("UklGR", "image/webp"),
)

PROMPT_TRANSLATOR_SYSTEM = """You are a precision prompt generator for an AI image editor. Users give vague photo edit requests. Your job is to:

- Translate vague terms like "make it cooler" or "fix the colors" into concrete edits using descriptive terms.
- NEVER change parts of the image the user didn't explicitly request.
- Output should use clear formatting:

INSTRUCTION: [one-liner user intent]
ACTION: [descriptive edit for Kontext model]

Be specific about what to edit and what to preserve. Focus on the exact request without adding unnecessary changes."""

DESCRIBE_IMAGE_PROMPT = """Analyze this image and provide a detailed description focusing on:
- Main subjects and objects
- Visual style, colors, and composition
- Lighting and mood
- Any text or notable details
- Overall scene context

Keep the description concise but comprehensive, suitable for AI image editing context."""

SCREENWRITER_SYSTEM = """You are an expert screenwriter and film consultant. Generate detailed, professional film scripts with proper formatting and structure.

Format the script with:
- Scene headers in ALL CAPS (INT./EXT. LOCATION - TIME)
- Character names in ALL CAPS when speaking
- Action lines in present tense
- Dialogue properly indented
- Parentheticals sparingly used

Generate a complete, production-ready script."""

CHARACTER_DESIGNER_SYSTEM = """You are an expert character designer for film and television. Create detailed, memorable characters with distinct personalities and clear visual characteristics.
Include specific physical details for consistent visual representation across shots."""

SHOT_PLANNER_SYSTEM = """You are an expert cinematographer and director. Analyze scripts and create detailed shot breakdowns for film production.
Balance wide (establishing) shots with medium shots and close-ups, and plan for smooth visual flow between shots.
Return ONLY valid JSON. No text outside JSON."""

CAMERA_ANGLES = ("wide", "medium", "close-up", "extreme-close-up", "overhead", "low-angle", "high-angle")

FALLBACK_TRAITS = ["mysterious", "determined"]
FALLBACK_BACKSTORY = "A character with an intriguing past."


def sniff_image_mime(image_base64: str) -> str:
    for prefix, mime_type in MIME_SIGNATURES:
        if image_base64.startswith(prefix):
            return mime_type
    return "image/jpeg"


def strip_code_fence(text: str) -> str:
    """Models like to wrap JSON in ```json fences even when told not to."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def _character_lines(characters: Sequence) -> str:
    lines = []
    for c in characters:
        lines.append(f"- {c.name}: {c.description or ''}")
        if c.personality_traits:
            lines.append(f"  Personality: {', '.join(c.personality_traits)}")
    return "\n".join(lines)


class GeminiService:
    """
    Text and vision calls against Gemini. Flash handles short, latency
    sensitive work (prompt translation, captions, character sheets); Pro
    writes scripts and plans shots.
    """

    def __init__(self, api_key: Optional[str] = None):
        self._api_key = api_key
        self._client = None

    @property
    def configured(self) -> bool:
        return bool(self._api_key or settings.GEMINI_API_KEY)

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.configured:
                raise UpstreamError("Gemini API not configured")
            self._client = genai.Client(api_key=self._api_key or settings.GEMINI_API_KEY)
        return self._client

    def _generate(
        self,
        model: str,
        contents,
        *,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        json_output: bool = False,
    ) -> str:
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
            response_mime_type="application/json" if json_output else None,
        )
        logger.info("[Gemini] %s request", model)
        response = self.client.models.generate_content(model=model, contents=contents, config=config)
        return (response.text or "").strip()

    # --- image editor helpers ---

    def translate_prompt(self, user_command: str, image_description: Optional[str] = None) -> str:
        prompt = f'User command: "{user_command}"\n'
        if image_description:
            prompt += f"\nCurrent image: {image_description}\n"
        prompt += "\nTranslate this into a precise image editing prompt:"

        return self._generate(
            settings.GEMINI_FLASH_MODEL,
            prompt,
            system_instruction=PROMPT_TRANSLATOR_SYSTEM,
        )

    def describe_image(self, image_base64: str) -> str:
        mime_type = sniff_image_mime(image_base64)
        logger.info("[Gemini] Describing image as %s", mime_type)
        image_part = types.Part.from_bytes(data=base64.b64decode(image_base64), mime_type=mime_type)
        return self._generate(settings.GEMINI_FLASH_MODEL, [DESCRIBE_IMAGE_PROMPT, image_part])

    # --- film tool ---

    def generate_script(
        self,
        prompt: str,
        characters: Sequence = (),
        genre: Optional[str] = None,
        target_duration: Optional[int] = None,
    ) -> dict:
        """Returns {title, content, estimated_duration} ready to store."""
        brief = [f"Project Brief: {prompt}"]
        if genre:
            brief.append(f"Genre: {genre}")
        if target_duration:
            brief.append(
                f"Target Duration: {target_duration} seconds "
                f"(approximately {round(target_duration / 60)} minutes)"
            )
        if characters:
            brief.append("Existing Characters:\n" + _character_lines(characters))
        brief.append(
            "Generate a complete screenplay that incorporates the existing characters "
            "(if any) and matches the requested genre and duration."
        )

        content = self._generate(
            settings.GEMINI_PRO_MODEL,
            "\n".join(brief),
            system_instruction=SCREENWRITER_SYSTEM,
        )
        if not content:
            raise UpstreamError("Failed to generate script", details="Empty response from Gemini")

        return {
            "title": extract_script_title(content) or "Untitled Script",
            "content": content,
            "estimated_duration": estimate_script_duration(content),
        }

    def generate_character_description(
        self,
        name: str,
        description: str,
        project_context: Optional[str] = None,
        genre: Optional[str] = None,
    ) -> dict:
        prompt = f"Character Name: {name}\nBasic Description: {description}\n"
        if genre:
            prompt += f"Genre: {genre}\n"
        if project_context:
            prompt += f"Project Context: {project_context}\n"
        prompt += (
            "\nCreate a detailed character profile as JSON:\n"
            '{"visual_description": "physical appearance, clothing, distinctive features", '
            '"personality_traits": ["3-5 key traits"], '
            '"backstory": "brief background"}'
        )

        text = self._generate(
            settings.GEMINI_FLASH_MODEL,
            prompt,
            system_instruction=CHARACTER_DESIGNER_SYSTEM,
            json_output=True,
        )

        try:
            data = json.loads(strip_code_fence(text))
            return {
                "visual_description": data.get("visual_description") or description,
                "personality_traits": [str(t) for t in data.get("personality_traits") or []],
                "backstory": data.get("backstory") or "",
            }
        except (json.JSONDecodeError, AttributeError):
            logger.warning("[Gemini] Character JSON unparseable, using first line")
            return {
                "visual_description": text.split("\n")[0] or description,
                "personality_traits": list(FALLBACK_TRAITS),
                "backstory": FALLBACK_BACKSTORY,
            }

    def plan_shots(
        self,
        script_content: str,
        characters: Sequence = (),
        *,
        target_shot_count: int = 20,
        include_character_close_ups: bool = True,
    ) -> List[BreakdownShot]:
        """
        LLM shot list. Any provider or parse failure drops back to the
        heuristic breakdown so the planner always returns something.
        """
        prompt = f"Script to analyze:\n{script_content}\n"
        if characters:
            prompt += "\nCharacters: " + "; ".join(
                f"{c.name} (id {c.id}) - {c.description or ''}" for c in characters
            ) + "\n"
        prompt += (
            f"\nTarget number of shots: {target_shot_count}\n"
            f"Include character close-ups: {'Yes' if include_character_close_ups else 'No'}\n"
            f"Camera angles: {', '.join(CAMERA_ANGLES)}\n\n"
            "Format as a JSON array:\n"
            '[{"sequence_number": 1, "scene_description": "description", '
            '"suggested_camera_angle": "wide", "suggested_duration": 5, '
            '"characters_mentioned": [1], "dialogue_snippet": "optional dialogue"}]'
        )

        try:
            text = self._generate(
                settings.GEMINI_PRO_MODEL,
                prompt,
                system_instruction=SHOT_PLANNER_SYSTEM,
                temperature=0.2,
                json_output=True,
            )
            return self._parse_planned_shots(text)
        except Exception as e:
            logger.warning("[Gemini] Shot planning failed, using heuristic breakdown: %s", e)
            return break_script_into_shots(
                script_content,
                characters,
                target_shot_count=target_shot_count,
                include_character_close_ups=include_character_close_ups,
            )

    def _parse_planned_shots(self, text: str) -> List[BreakdownShot]:
        data = json.loads(strip_code_fence(text))
        if isinstance(data, dict):
            data = data.get("shots", [])
        if not isinstance(data, list) or not data:
            raise ValueError("Expected a non-empty JSON array of shots")

        shots = []
        for index, raw in enumerate(data, start=1):
            angle = raw.get("suggested_camera_angle") or "medium"
            shots.append(
                BreakdownShot(
                    sequence_number=int(raw.get("sequence_number") or index),
                    scene_description=(raw.get("scene_description") or f"Shot {index}").strip(),
                    suggested_camera_angle=angle if angle in CAMERA_ANGLES else "medium",
                    suggested_duration=int(raw.get("suggested_duration") or 5),
                    characters_mentioned=[
                        int(c) for c in raw.get("characters_mentioned") or []
                        if str(c).isdigit()
                    ],
                    dialogue_snippet=raw.get("dialogue_snippet"),
                )
            )
        return shots
