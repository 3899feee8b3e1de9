"""
Change-hash for tracked point sequences.

The hash answers one question: "are these points the same as the ones I
saved?". It is an equality fingerprint, not a security primitive.
"""

import hashlib
import json
from typing import Sequence

from fieldarea.sessions.models import TrackedPoint


def hash_points(points: Sequence[TrackedPoint]) -> str:
    """
    Generate a deterministic fingerprint of an ordered point sequence.

    Each point is encoded as ``[lat, lng, kind, timestamp]`` in order.
    Coordinates are coerced to float and timestamps to int first, so that
    ``1`` and ``1.0`` hash alike; adding 0.0 folds -0.0 into 0.0, matching
    point equality. JSON renders floats with ``repr`` which is locale
    independent.

    Args:
        points: Tracked points in their current order.

    Returns:
        16 hex characters. The empty sequence has a hash too.
    """
    encoded = json.dumps(
        [
            [
                float(p.point.lat) + 0.0,
                float(p.point.lng) + 0.0,
                p.kind.value,
                int(p.captured_at_ms),
            ]
            for p in points
        ],
        separators=(",", ":"),
    )
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()[:16]
