"""
Reward Policy — milestone ladder for habit streaks.

Ladder: 1, 7, 14, 30, 60, 90, 180, 365 days.
Day 1 ("first day") is optional; see Settings.REWARD_FIRST_DAY_MILESTONE.

  should_notify(streak)  exact match only, so a milestone fires once and
                         not on every day past it
  earned_badges(streak)  every ladder value <= streak, ascending

Stateless. The caller decides how the message is delivered.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from reclaim.core.config import settings


FIRST_DAY = 1
LADDER: tuple[int, ...] = (7, 14, 30, 60, 90, 180, 365)


@dataclass(frozen=True)
class RewardPolicy:
    include_first_day: bool = True
    milestones: tuple[int, ...] = field(init=False)

    def __post_init__(self) -> None:
        ladder = ((FIRST_DAY,) if self.include_first_day else ()) + LADDER
        object.__setattr__(self, "milestones", ladder)

    def milestones_for(self, streak: int) -> set[int]:
        """Milestones reached at this streak level."""
        return {m for m in self.milestones if m <= streak}

    def should_notify(self, streak: int) -> bool:
        return streak in self.milestones

    def earned_badges(self, streak: int) -> list[int]:
        return sorted(self.milestones_for(streak))

    def next_milestone(self, streak: int) -> Optional[int]:
        """Smallest milestone still ahead, or None past the top of the ladder."""
        for m in self.milestones:
            if m > streak:
                return m
        return None

    def milestone_message(self, habit_name: str, streak: int) -> Optional[str]:
        """User-facing text for a milestone hit, None when nothing fires."""
        if not self.should_notify(streak):
            return None
        if streak == FIRST_DAY:
            return (
                f'Great start! You\'ve completed the first day of "{habit_name}", '
                "keep it going!"
            )
        return (
            f'Congratulations! You\'ve maintained "{habit_name}" '
            f"for {streak} days straight!"
        )


def default_policy() -> RewardPolicy:
    return RewardPolicy(include_first_day=settings.REWARD_FIRST_DAY_MILESTONE)
