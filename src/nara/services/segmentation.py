"""Split a video's frames and transcript into narrative segments.

Frames are bucketed by their position relative to the last frame's timestamp:

    <= 10%  opening
    <= 20%  setup
    <= 60%  main
    <= 90%  climax
    else    closing

The transcript is then cut into contiguous word runs sized in proportion to
each bucket's frame count.
"""

import math
from collections.abc import Sequence

from nara.models.assessment import SEGMENT_NAMES, CategorizedFrames, TranscriptSegments
from nara.models.media import Frame

# Inclusive upper bounds, in percent of the max timestamp.
SEGMENT_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (10, "opening"),
    (20, "setup"),
    (60, "main"),
    (90, "climax"),
)


def _segment_for_percent(percent: float) -> str:
    for upper, name in SEGMENT_THRESHOLDS:
        if percent <= upper:
            return name
    return "closing"


def categorize_frames(frames: Sequence[Frame]) -> CategorizedFrames:
    """Partition frames into the five narrative segments.

    Input order is preserved within each bucket (stable, not sorted).

    Args:
        frames: Frames in extraction order

    Returns:
        CategorizedFrames with ``max_timestamp`` set to the largest timestamp,
        or 0 for an empty input
    """
    if not frames:
        return CategorizedFrames()

    max_timestamp = max(frame.timestamp for frame in frames)
    buckets: dict[str, list[Frame]] = {name: [] for name in SEGMENT_NAMES}

    for frame in frames:
        # A single frame at t=0 has no span to divide by.
        percent = (frame.timestamp / max_timestamp) * 100 if max_timestamp else 0.0
        buckets[_segment_for_percent(percent)].append(frame)

    return CategorizedFrames(max_timestamp=max_timestamp, **buckets)


def split_transcript(transcript: str, categories: CategorizedFrames) -> TranscriptSegments:
    """Cut the transcript into per-segment word runs.

    Each segment takes ``floor(count / total * words)`` words from a running
    cursor. Words left over by the flooring belong to no segment. ``general``
    is always the untouched transcript.

    Args:
        transcript: Full transcript text
        categories: Output of :func:`categorize_frames`

    Returns:
        TranscriptSegments
    """
    total = categories.total_frames
    if not total:
        return TranscriptSegments(general=transcript)

    words = transcript.split()
    parts: dict[str, str] = {}
    cursor = 0
    for name in SEGMENT_NAMES:
        count = len(categories.bucket(name))
        take = math.floor((count / total) * len(words))
        parts[name] = " ".join(words[cursor:cursor + take])
        cursor += take

    return TranscriptSegments(general=transcript, **parts)
