# groupmaker/domain/preferences.py
"""
How a single user judges a group.

Pure functions over member id lists. A lower comparison result means the
first group is the one the observer would rather be in.

Functions included:
- count_wanted / count_unwanted
- preference_rank
- compare_groups_by_preference
- get_group_score
- net_score
- group_wants_user
- group_less_wanted_user
"""
from typing import List, Optional, Sequence

from groupmaker.domain.models import GroupingOptions, UserDTO

UNWANTED_WEIGHT = 2000
SURPLUS_WANTED_PENALTY = 2
HAS_WANTED_BONUS = 3
EXACT_WANTED_BONUS = 6


def count_wanted(prefs: UserDTO, members: Sequence[str]) -> int:
    # membership, not multiplicity: duplicates in prefs.wanted count once
    return sum(1 for member in members if member in prefs.wanted)


def count_unwanted(prefs: UserDTO, members: Sequence[str]) -> int:
    return sum(1 for member in members if member in prefs.unwanted)


def preference_rank(prefs: UserDTO, members: Sequence[str], desired_wanted_amount: int) -> int:
    """
    Absolute rank of one group from the observer's point of view, lower is better.
    """
    wanted = count_wanted(prefs, members)
    rank = count_unwanted(prefs, members) * UNWANTED_WEIGHT
    if wanted > desired_wanted_amount + 1:
        rank += SURPLUS_WANTED_PENALTY
    rank += -HAS_WANTED_BONUS if wanted > 0 else HAS_WANTED_BONUS
    rank += -EXACT_WANTED_BONUS if wanted == desired_wanted_amount else EXACT_WANTED_BONUS
    return rank


def compare_groups_by_preference(
    prefs: UserDTO,
    group: Sequence[str],
    other_group: Sequence[str],
    desired_wanted_amount: int,
) -> int:
    """
    Compare two groups through the eyes of one user.

    Returns a negative number if `group` is preferred, positive if
    `other_group` is preferred and 0 if the user does not care.
    A difference in unwanted members outweighs every other term.

    Example:
    >>> prefs = UserDTO(id="x", wanted=["a", "b", "c"], unwanted=["d", "e", "f"], gender="male")
    >>> compare_groups_by_preference(prefs, ["a", "b", "d"], ["a", "b", "c"], 1)
    1998
    """
    return (
        preference_rank(prefs, group, desired_wanted_amount)
        - preference_rank(prefs, other_group, desired_wanted_amount)
    )


def _without(members: Sequence[str], member: str) -> List[str]:
    return [m for m in members if m != member]


def get_group_score(members: Sequence[str], member: str, options: GroupingOptions) -> int:
    """
    How much the other members prefer the group without `member`.
    Higher means the member is more wanted by the rest of the group.
    """
    others = _without(members, member)
    return sum(
        compare_groups_by_preference(
            options.user(other), others, members, options.desired_wanted_amount
        )
        for other in others
    )


def net_score(new_user: str, members: Sequence[str], member: str, options: GroupingOptions) -> int:
    """
    Summed preference of every current member for the group where `member`
    is replaced by `new_user`, against the group as it is. Negative means
    the replacement is preferred.
    """
    replaced = _without(members, member) + [new_user]
    return sum(
        compare_groups_by_preference(
            options.user(current), replaced, members, options.desired_wanted_amount
        )
        for current in members
    )


def group_wants_user(new_user: str, members: Sequence[str], options: GroupingOptions) -> bool:
    return any(net_score(new_user, members, member, options) < 0 for member in members)


def group_less_wanted_user(
    new_user: str, members: Sequence[str], options: GroupingOptions
) -> Optional[str]:
    """
    The member whose replacement by `new_user` the group likes best, or None
    if no replacement would be an improvement. Ties go to the earlier member.
    """
    best_member = None
    best_score = 0
    for member in members:
        score = net_score(new_user, members, member, options)
        if score < best_score:
            best_member, best_score = member, score
    return best_member
