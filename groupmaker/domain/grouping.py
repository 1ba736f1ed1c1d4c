# groupmaker/domain/grouping.py
"""
One grouping attempt: greedy placement followed by relaxation.

All functions work on lists of GroupDTO that belong to the current attempt
and are mutated in place. Callers that need the input untouched pass a
copy (see copy_groups).
"""
import logging
import random
from typing import Callable, List, Optional, Sequence, Tuple

from groupmaker.domain.errors import ConfigurationError, UnplaceableUserError
from groupmaker.domain.models import Gender, GroupDTO, GroupingOptions, Partition, UserDTO
from groupmaker.domain.preferences import (
    get_group_score,
    group_less_wanted_user,
    preference_rank,
)

logger = logging.getLogger(__name__)

# constraint(group, user) -> may the user join the group
Constraint = Callable[[GroupDTO, UserDTO], bool]


def validate_options(options: GroupingOptions) -> None:
    """
    Fail fast on caller mistakes. Stale wanted/unwanted references are
    tolerated unless options.strict is set.
    """
    if options.group_size <= 0:
        raise ConfigurationError(f"group_size must be positive, got {options.group_size}")
    if options.desired_wanted_amount < 0:
        raise ConfigurationError(
            f"desired_wanted_amount must not be negative, got {options.desired_wanted_amount}"
        )
    if not options.initial_groups:
        raise ConfigurationError("initial_groups must contain at least one group")

    group_ids = [g.id for g in options.initial_groups]
    if len(set(group_ids)) != len(group_ids):
        raise ConfigurationError("initial_groups contains duplicate group ids")

    user_ids = [u.id for u in options.data]
    if len(set(user_ids)) != len(user_ids):
        raise ConfigurationError("data contains duplicate user ids")

    seeded = [member for g in options.initial_groups for member in g.members]
    if len(set(seeded)) != len(seeded):
        raise ConfigurationError("a user is seeded into more than one group slot")
    unknown_seeded = [member for member in seeded if not options.has_user(member)]
    if unknown_seeded:
        raise ConfigurationError(f"seeded members missing from data: {', '.join(unknown_seeded)}")

    if options.strict:
        stale = sorted(
            {
                ref
                for u in options.data
                for ref in [*u.wanted, *u.unwanted]
                if not options.has_user(ref)
            }
        )
        if stale:
            raise ConfigurationError(f"unknown users referenced: {', '.join(stale)}")


def copy_groups(groups: Sequence[GroupDTO]) -> List[GroupDTO]:
    return [g.model_copy(deep=True) for g in groups]


def is_placed(groups: Sequence[GroupDTO], user_id: str) -> bool:
    return any(user_id in g.members for g in groups)


def get_unused_users(groups: Sequence[GroupDTO], options: GroupingOptions) -> List[UserDTO]:
    return [u for u in options.data if not is_placed(groups, u.id)]


def count_gender(members: Sequence[str], gender: Gender, options: GroupingOptions) -> int:
    return sum(1 for m in members if options.user(m).gender == gender)


def balance_gender(members: Sequence[str], gender: Gender, options: GroupingOptions) -> List[str]:
    """
    Remove the least wanted members of `gender` until at most
    group_size // 2 of them remain.

    Example:
    >>> balance_gender(["a", "b", "c"], Gender.male, options)   # all male, group_size 4
    ['a', 'c']
    """
    current = list(members)
    while count_gender(current, gender, options) > options.gender_cap:
        candidates = [m for m in current if options.user(m).gender == gender]
        least_wanted = min(candidates, key=lambda m: get_group_score(current, m, options))
        current.remove(least_wanted)
    return current


def sort_groups_by_preference(
    prefs: UserDTO, groups: Sequence[GroupDTO], options: GroupingOptions
) -> List[GroupDTO]:
    return sorted(
        groups,
        key=lambda g: preference_rank(prefs, g.members, options.desired_wanted_amount),
    )


def _try_place(user: UserDTO, group: GroupDTO, options: GroupingOptions) -> None:
    welcome = all(user.id not in options.user(m).unwanted for m in group.members)
    if len(group.members) < options.group_size and welcome:
        group.members = balance_gender([*group.members, user.id], user.gender, options)
        return

    evicted = group_less_wanted_user(user.id, group.members, options)
    if evicted is not None:
        replaced = [m for m in group.members if m != evicted] + [user.id]
        group.members = balance_gender(replaced, user.gender, options)
        logger.debug("User %s replaced %s in group %s", user.id, evicted, group.id)


def place_all(
    initial_groups: Sequence[GroupDTO],
    options: GroupingOptions,
    rng: Optional[random.Random] = None,
) -> List[GroupDTO]:
    """
    Greedy pass: walk the users in random order and put each one into the
    group it likes best that will take it.

    A group takes a user when it has room and nobody in it dislikes the
    user, or when replacing one of its members by the user is an
    improvement for the group. Gender is rebalanced after every change,
    which may push out the newcomer too; users evicted this way stay
    unplaced and are left for with_unused_users.
    """
    rng = rng or random.Random()
    groups = copy_groups(initial_groups)

    users = [u for u in options.data if not is_placed(groups, u.id)]
    rng.shuffle(users)

    for user in users:
        for group in sort_groups_by_preference(user, groups, options):
            _try_place(user, group, options)
            if user.id in group.members:
                break

    logger.debug(
        "Greedy pass placed %d of %d users",
        sum(len(g.members) for g in groups),
        len(options.data),
    )
    return groups


def sort_groups_by_length(groups: Sequence[GroupDTO]) -> List[GroupDTO]:
    """All groups, emptiest first. Empty slots come before occupied ones."""
    return sorted(groups, key=lambda g: len(g.members))


def add_users_with_constraints(
    groups: List[GroupDTO], options: GroupingOptions, constraint: Constraint
) -> int:
    placed = 0
    for user in get_unused_users(groups, options):
        for group in sort_groups_by_length(groups):
            if constraint(group, user):
                group.members.append(user.id)
                placed += 1
                break
    return placed


def relaxation_tiers(options: GroupingOptions) -> List[Tuple[str, Constraint]]:
    """(name, constraint) pairs from strictest to unconditional."""

    def has_room(group: GroupDTO, user: UserDTO) -> bool:
        return len(group.members) < options.group_size

    def not_disliked(group: GroupDTO, user: UserDTO) -> bool:
        return all(user.id not in options.user(m).unwanted for m in group.members)

    def dislikes_nobody(group: GroupDTO, user: UserDTO) -> bool:
        return all(m not in user.unwanted for m in group.members)

    def gender_below_cap(group: GroupDTO, user: UserDTO) -> bool:
        return count_gender(group.members, user.gender, options) < options.gender_cap

    return [
        (
            "without conflict",
            lambda g, u: has_room(g, u)
            and not_disliked(g, u)
            and dislikes_nobody(g, u)
            and gender_below_cap(g, u),
        ),
        (
            "gender conflict",
            lambda g, u: has_room(g, u) and not_disliked(g, u) and dislikes_nobody(g, u),
        ),
        ("size conflict", lambda g, u: not_disliked(g, u) and dislikes_nobody(g, u)),
        ("disliked by members", dislikes_nobody),
        ("unconditional", lambda g, u: True),
    ]


def with_unused_users(groups: List[GroupDTO], options: GroupingOptions) -> List[GroupDTO]:
    """
    Place every user the greedy pass left out, in five tiers:

    1. room, no unwanted either way, gender below cap
    2. room, no unwanted either way
    3. no unwanted either way, size may be exceeded
    4. the new user dislikes nobody in the group
    5. anywhere

    Each tier targets the emptiest group first, empty slots included.
    Raises UnplaceableUserError if anyone is still left over.
    """
    for name, constraint in relaxation_tiers(options):
        if not get_unused_users(groups, options):
            break
        placed = add_users_with_constraints(groups, options, constraint)
        if placed:
            logger.debug("Relaxation tier '%s' placed %d users", name, placed)

    leftover = get_unused_users(groups, options)
    if leftover:
        raise UnplaceableUserError(u.id for u in leftover)
    return groups


def get_groups(
    options: GroupingOptions,
    rng: Optional[random.Random] = None,
    validate: bool = True,
) -> Partition:
    """
    One complete attempt over a fresh copy of options.initial_groups.
    Pass validate=False when the options were already checked.
    """
    if validate:
        validate_options(options)
    groups = place_all(options.initial_groups, options, rng)
    return with_unused_users(groups, options)
