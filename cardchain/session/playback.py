"""
Playback - Drive a CombatSequence against a clock.

The sequence itself is static. Playback only tracks when it started, so
cancelling is just forgetting the timeline; nothing needs rolling back.
"""

from __future__ import annotations
from dataclasses import dataclass
import time

from ..engine_core.animation import AttackAnimation, CombatSequence, active_animations_for_slot


@dataclass
class AnimationPlayback:
    sequence: CombatSequence | None
    started_at: float | None = None  # seconds, caller's clock

    def start(self, now: float | None = None) -> None:
        self.started_at = time.monotonic() if now is None else now

    def cancel(self) -> None:
        """Discard the timeline (e.g. the ledger confirmed the next turn)."""
        self.sequence = None
        self.started_at = None

    @property
    def is_running(self) -> bool:
        return self.sequence is not None and self.started_at is not None

    def elapsed_ms(self, now: float | None = None) -> float:
        if self.started_at is None:
            return 0.0
        now = time.monotonic() if now is None else now
        return (now - self.started_at) * 1000.0

    def is_finished(self, now: float | None = None) -> bool:
        if not self.is_running:
            return True
        return self.elapsed_ms(now) > self.sequence.total_duration

    def active(self, now: float | None = None) -> list[AttackAnimation]:
        if not self.is_running:
            return []
        return self.sequence.active_at(self.elapsed_ms(now))

    def active_for_slot(
        self,
        slot: int,
        player_idx: int | None = None,
        now: float | None = None,
    ) -> list[AttackAnimation]:
        if not self.is_running:
            return []
        return active_animations_for_slot(
            self.sequence.animations, slot, self.elapsed_ms(now), player_idx=player_idx,
        )
