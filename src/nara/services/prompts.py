"""Prompt templates for segment assessment and the whole-video summary."""

import json
from collections.abc import Mapping, Sequence
from typing import Any

from nara.models.media import Frame

SYSTEM_PROMPT = "You are a professional video analyzer."

_SEGMENT_PROMPT = """\
Do an assessment of the following video segment: "{segment_name}".
Attached frames (images): {frame_urls}
Transcript audio: {transcript}

Return ONLY a valid JSON in the following format:

{{
  "recomendations": [string, ...],
  "assessmentIndicators": {{
    "<indicator_name>": boolean,
    "<indicator_name_2>": boolean
    // ...as many as needed, each key is a relevant assessment aspect you decide
  }}
}}

Notes:
- "assessmentIndicators" should be a dictionary/object with keys for **any relevant indicators you find important for this segment** (not limited to any fixed list).
- The keys in "assessmentIndicators" must be descriptive and written in English, e.g., "Engagement potential", "Visual originality", "Audio clarity", etc.
- Do NOT leave "recomendations" as an empty array. Always provide at least one actionable recommendation.
- Do NOT leave "assessmentIndicators" as an empty object. Always provide at least one indicator relevant to this segment.
- If unsure, infer plausible indicators and recommendations based on the content.
- All keys should have a boolean value (true if the indicator is satisfied, false if not).
- Do NOT include any text or explanation outside the JSON.
- Output must be in English.
"""

_SUMMARY_PROMPT = """\
You are given the assessment results of each part of a video:
{segment_results}

And the following is the full transcript of the video's audio:
{transcript}

Now, do NOT summarize the assessment results.
Instead, generate a concise summary of WHAT this video is about.
Your summary should answer: "What is the video about, and what happens from the beginning to the end?"
For example: "A video that shows marketing of XYZ product. In the beginning, the video introduces the product, followed by user testimonials, then explains the benefits, and ends with a call to action."

Return ONLY a valid JSON in the following format:
{{
  "recomendations": [string, ...],
  "assessmentIndicators": {{ ... }},
  "summary": string
}}

- The "summary" field is REQUIRED and must be a non-empty string.
- Write the summary in English, describing the video content/story, not the evaluation or recommendations.
- The "recomendations" and "assessmentIndicators" fields should be copied from previous results or left empty (as you see fit).
- Do NOT include any explanation or text outside the JSON.
"""


def build_segment_prompt(
    segment_name: str,
    segment_transcript: str,
    segment_frames: Sequence[Frame],
) -> str:
    """Build the assessment request for one narrative segment.

    Args:
        segment_name: Segment name (opening, setup, main, climax, closing)
        segment_transcript: Transcript slice for the segment
        segment_frames: Frames whose URLs are cited as evidence

    Returns:
        Prompt text
    """
    return _SEGMENT_PROMPT.format(
        segment_name=segment_name,
        frame_urls=", ".join(frame.url for frame in segment_frames),
        transcript=segment_transcript,
    )


def build_summary_prompt(
    segment_results: Mapping[str, Any],
    full_transcript: str,
) -> str:
    """Build the whole-video summary request.

    Args:
        segment_results: Decoded JSON result per segment name, in narrative order
        full_transcript: The complete transcript

    Returns:
        Prompt text
    """
    lines = [
        f"{name.capitalize()}: {json.dumps(result, ensure_ascii=False)}"
        for name, result in segment_results.items()
    ]
    return _SUMMARY_PROMPT.format(
        segment_results=",\n".join(lines),
        transcript=full_transcript,
    )


def build_messages(prompt: str) -> list[dict[str, str]]:
    """Wrap a prompt into the chat messages sent to the completion service."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]
