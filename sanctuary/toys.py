from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Optional

from sanctuary.constants import TOY_SESSIONS_TABLE
from sanctuary.data.backend import BackendError
from sanctuary.data.models import ToySessionRecord

logger = logging.getLogger(__name__)

TOY_TYPES = [
    ("vibrator", "Vibrator", "💫"),
    ("remote", "Remote Control", "🎮"),
    ("smart", "Smart Device", "📱"),
    ("couples", "Couples Toy", "💕"),
    ("other", "Other", "⭐"),
]

CONNECTED = "connected"
DISCONNECTED = "disconnected"
PAIRING = "pairing"


@dataclass(frozen=True)
class Pattern:
    id: str
    name: str
    description: str
    duration: int
    intensity_map: List[int]
    is_custom: bool = False


@dataclass
class Toy:
    id: str
    name: str
    type: str
    connection_status: str = DISCONNECTED
    battery_level: int = 100
    current_intensity: int = 0
    patterns: List[Pattern] = field(default_factory=list)


PRESET_PATTERNS = [
    Pattern("1", "Gentle Wave", "Soft, rolling waves of intensity", 60, [30, 40, 50, 60, 70, 60, 50, 40, 30]),
    Pattern("2", "Pulse Play", "Quick pulses with increasing intensity", 45, [20, 80, 20, 80, 30, 90, 30, 90]),
    Pattern("3", "Building Excitement", "Gradually building to a peak", 90, [10, 20, 30, 40, 50, 60, 70, 80, 90, 100]),
    Pattern("4", "Teasing Touch", "Playful teasing with unexpected pauses", 75, [40, 0, 60, 0, 80, 0, 100, 50]),
]


def sample_toys():
    return [
        Toy("1", "Lovense Edge", "couples", CONNECTED, 85, 0, list(PRESET_PATTERNS)),
        Toy("2", "We-Vibe Sync", "couples", DISCONNECTED, 92, 0, list(PRESET_PATTERNS)),
    ]


def battery_color(level):
    if level > 60:
        return "green"
    if level > 30:
        return "orange"
    return "red"


def _utcnow():
    return datetime.now(timezone.utc)


class ToySimulator:
    """Simulated device panel. Nothing here talks to hardware."""

    def __init__(self, toys=None, clock=_utcnow):
        self.toys: List[Toy] = list(toys if toys is not None else sample_toys())
        self.active_toy_id: Optional[str] = None
        self.current_pattern: Optional[Pattern] = None
        self.custom_intensity = 50
        self.started_at: Optional[datetime] = None
        self.mood_before = 5
        self.notes = ""
        self._clock = clock

    @property
    def active_toy(self) -> Optional[Toy]:
        return self.get(self.active_toy_id)

    @property
    def is_playing(self) -> bool:
        return self.started_at is not None

    def get(self, toy_id) -> Optional[Toy]:
        for toy in self.toys:
            if toy.id == toy_id:
                return toy
        return None

    def _set_toy(self, toy_id, **changes):
        self.toys = [replace(toy, **changes) if toy.id == toy_id else toy for toy in self.toys]

    def begin_pairing(self, toy_id):
        self._set_toy(toy_id, connection_status=PAIRING)

    def finish_pairing(self, toy_id):
        self._set_toy(toy_id, connection_status=CONNECTED)

    def select_toy(self, toy_id):
        if self.get(toy_id) is not None:
            self.active_toy_id = toy_id

    def select_pattern(self, pattern: Pattern):
        self.current_pattern = pattern
        logger.debug("Pattern selected: %s", pattern.name)

    def update_intensity(self, intensity):
        if self.active_toy is None:
            return
        intensity = max(0, min(100, int(intensity)))
        self.custom_intensity = intensity
        self._set_toy(self.active_toy_id, current_intensity=intensity)

    def start(self):
        if self.active_toy is None:
            return False
        self.started_at = self._clock()
        return True

    def session_record(self, created_by) -> Optional[dict]:
        toy = self.active_toy
        if toy is None or self.started_at is None:
            return None
        seconds = int((self._clock() - self.started_at).total_seconds())
        intensities = self.current_pattern.intensity_map if self.current_pattern else [self.custom_intensity]
        record = ToySessionRecord(
            toy_name=toy.name,
            toy_type=toy.type,
            session_data={
                "pattern": self.current_pattern.name if self.current_pattern else None,
                "max_intensity": max(intensities),
                "avg_intensity": self.custom_intensity,
            },
            duration=f"{seconds} seconds",
            session_notes=self.notes,
            mood_before=self.mood_before,
        )
        return {**record.model_dump(), "created_by": created_by}

    def stop(self, backend, created_by) -> Optional[dict]:
        record = self.session_record(created_by)
        if record is None:
            return None
        try:
            backend.insert(TOY_SESSIONS_TABLE, [record])
        except BackendError:
            logger.exception("Error saving session")
        self.started_at = None
        self.mood_before = 5
        self.notes = ""
        return record
