"""
Tests for the milestone ladder.
"""
import pytest

from reclaim.core.config import settings
from reclaim.services.reward_policy import RewardPolicy, default_policy


LADDER = [1, 7, 14, 30, 60, 90, 180, 365]


@pytest.fixture()
def policy():
    return RewardPolicy(include_first_day=True)


@pytest.fixture()
def no_first_day():
    return RewardPolicy(include_first_day=False)


class TestShouldNotify:
    @pytest.mark.parametrize("streak", LADDER)
    def test_fires_on_exact_milestones(self, policy, streak):
        assert policy.should_notify(streak)

    @pytest.mark.parametrize("streak", [0, 2, 6, 8, 15, 29, 31, 100, 364, 366, 1000])
    def test_silent_between_milestones(self, policy, streak):
        assert not policy.should_notify(streak)

    def test_only_ladder_values_fire(self, policy):
        fired = [s for s in range(0, 400) if policy.should_notify(s)]
        assert fired == LADDER

    def test_first_day_can_be_disabled(self, no_first_day):
        assert not no_first_day.should_notify(1)
        assert no_first_day.should_notify(7)
        assert no_first_day.milestones == tuple(LADDER[1:])


class TestEarnedBadges:
    def test_none_at_zero(self, policy):
        assert policy.earned_badges(0) == []

    @pytest.mark.parametrize("streak,expected", [
        (1, [1]),
        (6, [1]),
        (7, [1, 7]),
        (29, [1, 7, 14]),
        (365, LADDER),
        (500, LADDER),
    ])
    def test_badges_at_level(self, policy, streak, expected):
        assert policy.earned_badges(streak) == expected

    def test_monotonic_and_bounded(self, policy):
        previous = 0
        for streak in range(0, 400):
            badges = policy.earned_badges(streak)
            assert len(badges) >= previous
            assert all(m <= streak for m in badges)
            assert badges == sorted(badges)
            previous = len(badges)

    def test_badges_follow_ladder_variant(self, no_first_day):
        assert no_first_day.earned_badges(6) == []
        assert no_first_day.earned_badges(14) == [7, 14]

    def test_milestones_for_is_a_set(self, policy):
        assert policy.milestones_for(30) == {1, 7, 14, 30}


class TestMessages:
    def test_next_milestone(self, policy):
        assert policy.next_milestone(0) == 1
        assert policy.next_milestone(1) == 7
        assert policy.next_milestone(45) == 60
        assert policy.next_milestone(365) is None

    def test_first_day_message(self, policy):
        msg = policy.milestone_message("Drink water", 1)
        assert "first day" in msg
        assert '"Drink water"' in msg

    def test_streak_message(self, policy):
        msg = policy.milestone_message("Read", 30)
        assert "30 days straight" in msg

    def test_no_message_off_milestone(self, policy):
        assert policy.milestone_message("Read", 31) is None

    def test_default_policy_follows_settings(self):
        assert default_policy().include_first_day == settings.REWARD_FIRST_DAY_MILESTONE
