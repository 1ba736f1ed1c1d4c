# tests/conftest.py
import pytest

from groupmaker.domain.models import GroupDTO, GroupingOptions, UserDTO

# 26 users, a..l male and m..z female; lists contain duplicates and
# references to themselves on purpose
ROSTER = [
    ("a", ["b", "c", "d", "z", "q", "w"], ["e", "j"], "male"),
    ("b", ["a", "e", "d", "r", "w", "e"], ["c", "f"], "male"),
    ("c", ["f", "e", "d", "y", "e", "t"], ["b", "a"], "male"),
    ("d", ["f", "b", "c", "u", "r", "y"], ["a", "g"], "male"),
    ("e", ["c", "b", "a", "i", "t", "h"], ["g", "w"], "male"),
    ("f", ["b", "d", "e", "o", "y", "i"], ["h", "x"], "male"),
    ("g", ["a", "c", "e", "p", "u", "o"], ["b", "q"], "male"),
    ("h", ["e", "d", "f", "m", "i", "n"], ["d", "o"], "male"),
    ("i", ["j", "h", "a", "b", "o", "v"], ["f", "l"], "male"),
    ("j", ["d", "c", "e", "c", "p", "x"], ["b", "v"], "male"),
    ("k", ["b", "j", "c", "x", "l", "z"], ["a", "n"], "male"),
    ("l", ["n", "k", "z", "s", "k", "a"], ["g", "m"], "male"),
    ("m", ["j", "t", "w", "a", "h", "r"], ["z", "e"], "female"),
    ("n", ["q", "k", "i", "w", "g", "y"], ["s", "t"], "female"),
    ("o", ["k", "o", "m", "r", "f", "u"], ["h", "j"], "female"),
    ("p", ["u", "c", "j", "y", "s", "i"], ["m", "o"], "female"),
    ("q", ["x", "w", "y", "u", "z", "e"], ["l", "b"], "female"),
    ("r", ["m", "m", "e", "i", "a", "t"], ["g", "n"], "female"),
    ("s", ["c", "u", "a", "o", "q", "y"], ["i", "r"], "female"),
    ("t", ["p", "l", "m", "e", "w", "u"], ["g", "q"], "female"),
    ("u", ["n", "d", "v", "a", "t", "x"], ["c", "o"], "female"),
    ("v", ["y", "g", "x", "b", "u", "s"], ["a", "k"], "female"),
    ("w", ["p", "f", "g", "z", "i", "v"], ["x", "m"], "female"),
    ("x", ["b", "l", "i", "a", "o", "x"], ["n", "v"], "female"),
    ("y", ["q", "l", "o", "b", "r", "r"], ["k", "z"], "female"),
    ("z", ["t", "n", "q", "m", "a", "b"], ["l", "o"], "female"),
]


def make_users(rows):
    return [UserDTO(id=i, wanted=w, unwanted=u, gender=g) for i, w, u, g in rows]


def make_options(users, group_size=4, desired_wanted_amount=1, groups=None, **kwargs):
    if groups is None:
        groups = [GroupDTO(id=str(i)) for i in range(1, 14)]
    return GroupingOptions(
        group_size=group_size,
        desired_wanted_amount=desired_wanted_amount,
        initial_groups=groups,
        data=users,
        **kwargs,
    )


@pytest.fixture
def users():
    return make_users(ROSTER)


@pytest.fixture
def options(users):
    return make_options(users)
