from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class RoadmapStep:
    phase: str
    title: str
    description: str
    details: Tuple[str, ...] = field(default_factory=tuple)
    status: str = "future"  # completed | current | future


ROADMAP_DATA: Tuple[RoadmapStep, ...] = (
    RoadmapStep(
        phase="Phase 1",
        title="Core System",
        description="Base system and three-language search",
        details=(
            "Modern UI/UX with Akha patterns",
            "Akha-Thai-English search",
            "Bookmarks for saved words",
            "Basic offline use",
        ),
        status="completed",
    ),
    RoadmapStep(
        phase="Phase 2",
        title="Release Version",
        description="Public release and data management",
        details=(
            "Live sync from Google Sheets",
            "Word of the Day persisted per day",
            "Smoother, more polished UI",
        ),
        status="completed",
    ),
    RoadmapStep(
        phase="Phase 3",
        title="Multimedia & Community",
        description="Learning with audio and community",
        details=(
            "Text-to-speech pronunciation",
            "Cultural image and costume gallery",
            "Context-aware usage suggestions by region",
            "Folk vocabulary guessing mini-game",
        ),
        status="current",
    ),
)


def roadmap_payload() -> List[Dict[str, Any]]:
    out = []
    for step in ROADMAP_DATA:
        row = asdict(step)
        row["details"] = list(step.details)
        out.append(row)
    return out
