from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

NOT_INSTALLED = "0.0.0"

_SEGMENT_RE = re.compile(r"\d+")


class VersionStatus(str, Enum):
    OK = "ok"
    BELOW_MIN = "below_min"
    ABOVE_MAX = "above_max"


@dataclass(frozen=True)
class VersionSpec:
    minimum: str
    maximum: Optional[str] = None
    probe: Optional[Callable[[], str]] = None


def parse_version(text: str) -> Tuple[int, ...]:
    """Turn "v20.11.1" or "0.40.1\\n" into a tuple of ints.

    Only the leading dotted numeric part counts; pre-release and build
    suffixes are ignored. Empty input means not installed.
    """

    text = (text or "").strip().lstrip("vV")
    if not text:
        text = NOT_INSTALLED
    parts = []
    for seg in text.split("."):
        m = _SEGMENT_RE.match(seg)
        if not m:
            break
        parts.append(int(m.group(0)))
        if m.end() != len(seg):
            break
    return tuple(parts) or (0,)


def compare_versions(a: str, b: str) -> int:
    pa, pb = parse_version(a), parse_version(b)
    width = max(len(pa), len(pb))
    pa = pa + (0,) * (width - len(pa))
    pb = pb + (0,) * (width - len(pb))
    return (pa > pb) - (pa < pb)


def check(installed: str, spec: VersionSpec) -> VersionStatus:
    if compare_versions(installed, spec.minimum) < 0:
        return VersionStatus.BELOW_MIN
    if spec.maximum is not None and compare_versions(installed, spec.maximum) > 0:
        return VersionStatus.ABOVE_MAX
    return VersionStatus.OK
