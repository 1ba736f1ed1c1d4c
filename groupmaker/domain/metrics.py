# groupmaker/domain/metrics.py
"""
Whole-partition measures and the multi-start selector.

Functions included:
- get_wanted_amount
- get_unwanted_amount
- wanted_per_user
- avg_without_zero
- compare_partitions
- get_groups_iterations
- build_report
"""
import logging
import random
from dataclasses import dataclass, field
from statistics import mean
from typing import Dict, List, Optional, Sequence

from groupmaker.domain.errors import ConfigurationError
from groupmaker.domain.grouping import get_groups, validate_options
from groupmaker.domain.models import GroupDTO, GroupingOptions, Partition

logger = logging.getLogger(__name__)

UNWANTED_WEIGHT = 1000
AVERAGE_WANTED_WEIGHT = 50
DESIRED_DISTANCE_WEIGHT = 60
WITHOUT_WANTED_WEIGHT = 310
EMPTY_WEIGHT = 2000
NON_EMPTY_WEIGHT = 3000


def _others(members: Sequence[str], user_id: str) -> List[str]:
    return [m for m in members if m != user_id]


def get_wanted_amount(groups: Sequence[GroupDTO], options: GroupingOptions) -> int:
    """
    Number of users sharing a group with at least one user they want.

    Example:
    >>> get_wanted_amount([GroupDTO(id="1", members=["a", "b", "c"])], options)
    2
    """
    return sum(
        1
        for g in groups
        for user_id in g.members
        if any(other in options.user(user_id).wanted for other in _others(g.members, user_id))
    )


def get_unwanted_amount(groups: Sequence[GroupDTO], options: GroupingOptions) -> int:
    """Number of users sharing a group with at least one user they do not want."""
    return sum(
        1
        for g in groups
        for user_id in g.members
        if any(other in options.user(user_id).unwanted for other in _others(g.members, user_id))
    )


def wanted_per_user(groups: Sequence[GroupDTO], options: GroupingOptions) -> List[int]:
    """For each placed user, how many of their group mates they want."""
    return [
        sum(1 for other in _others(g.members, user_id) if other in options.user(user_id).wanted)
        for g in groups
        for user_id in g.members
    ]


def avg_without_zero(values: Sequence[float]) -> float:
    """Mean of values, 0 for an empty sequence."""
    return mean(values) if values else 0


def _prefer_lower(value, other_value, weight: int) -> int:
    if value < other_value:
        return -weight
    if value > other_value:
        return weight
    return 0


def compare_partitions(
    groups: Sequence[GroupDTO], other_groups: Sequence[GroupDTO], options: GroupingOptions
) -> int:
    """
    Set score of two partitions. Negative means `groups` is better.

    Terms, heaviest first: any empty partition loses, fewer unwanted
    co-placements, fewer users without a wanted group mate, average wanted
    per user closer to desired_wanted_amount, higher average wanted per user.
    Each term outweighs all lighter ones together.
    """
    empty = not any(g.members for g in groups)
    other_empty = not any(g.members for g in other_groups)
    per_user = wanted_per_user(groups, options)
    other_per_user = wanted_per_user(other_groups, options)
    average = avg_without_zero(per_user)
    other_average = avg_without_zero(other_per_user)
    desired = options.desired_wanted_amount

    return (
        _prefer_lower(empty, other_empty, EMPTY_WEIGHT)
        + _prefer_lower(empty, other_empty, NON_EMPTY_WEIGHT)
        + _prefer_lower(
            get_unwanted_amount(groups, options),
            get_unwanted_amount(other_groups, options),
            UNWANTED_WEIGHT,
        )
        + _prefer_lower(per_user.count(0), other_per_user.count(0), WITHOUT_WANTED_WEIGHT)
        + _prefer_lower(abs(desired - average), abs(desired - other_average), DESIRED_DISTANCE_WEIGHT)
        + _prefer_lower(-average, -other_average, AVERAGE_WANTED_WEIGHT)
    )


def get_groups_iterations(
    iterations: int, options: GroupingOptions, rng: Optional[random.Random] = None
) -> Partition:
    """
    Run `iterations` independent attempts and keep the best by
    compare_partitions. On a tie the earlier attempt is kept.
    """
    if iterations <= 0:
        raise ConfigurationError(f"iterations must be positive, got {iterations}")
    validate_options(options)
    rng = rng or random.Random()

    best = None
    for iteration in range(iterations):
        groups = get_groups(options, rng, validate=False)
        logger.debug(
            "Attempt %d/%d: unwanted=%d wanted=%d",
            iteration + 1,
            iterations,
            get_unwanted_amount(groups, options),
            get_wanted_amount(groups, options),
        )
        if best is None or compare_partitions(groups, best, options) < 0:
            best = groups
    return best


@dataclass
class PartitionReport:
    wanted_amount: int
    unwanted_amount: int
    average_wanted: float
    without_wanted: int
    group_sizes: Dict[str, int] = field(default_factory=dict)


def build_report(groups: Sequence[GroupDTO], options: GroupingOptions) -> PartitionReport:
    per_user = wanted_per_user(groups, options)
    return PartitionReport(
        wanted_amount=get_wanted_amount(groups, options),
        unwanted_amount=get_unwanted_amount(groups, options),
        average_wanted=avg_without_zero(per_user),
        without_wanted=per_user.count(0),
        group_sizes={g.id: len(g.members) for g in groups},
    )
