"""Command that converts an axis-magnitude rotation to roll, pitch, yaw."""

from __future__ import annotations

import re
import sys

from .geometry import rotation_from_axis_magnitude, rpy_from_rotation

_LEADING_FLOAT = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _atof(text: str) -> float:
    """Parse the leading number of ``text``; 0.0 if there is none."""
    match = _LEADING_FLOAT.match(text)
    return float(match.group()) if match else 0.0


def main(argv=None) -> int:
    """Print roll, pitch, yaw for the axis-magnitude given as three arguments."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 3:
        sys.stderr.write(
            "to_rpy: Converts axis-magnitude to RPY notation\n\n"
            "usage: to_rpy a b c\n\n"
        )
        return -1

    x, y, z = (_atof(a) for a in args[:3])
    roll, pitch, yaw = rpy_from_rotation(rotation_from_axis_magnitude(x, y, z))
    print(f"{roll:g}, {pitch:g}, {yaw:g}")
    return 0


if __name__ == "__main__":
    sys.exit(main())