# tests/test_metrics.py
import logging
import random

import pytest

from groupmaker.domain import grouping, metrics
from groupmaker.domain.errors import ConfigurationError
from groupmaker.domain.grouping import get_groups
from groupmaker.domain.metrics import (
    avg_without_zero,
    build_report,
    compare_partitions,
    get_groups_iterations,
    get_unwanted_amount,
    get_wanted_amount,
    wanted_per_user,
)
from groupmaker.domain.models import GroupDTO

ABC = [GroupDTO(id="a", members=["a", "b", "c"])]

# -------------------------------
# Helper metrics
# -------------------------------

def test_wanted_amount(options):
    assert get_wanted_amount(ABC, options) == 2


def test_unwanted_amount(options):
    assert get_unwanted_amount(ABC, options) == 2


def test_wanted_per_user(options):
    assert wanted_per_user(ABC, options) == [2, 1, 0]


def test_self_reference_is_not_a_wanted_mate(options):
    # o lists itself as wanted
    assert wanted_per_user([GroupDTO(id="1", members=["o"])], options) == [0]
    assert get_wanted_amount([GroupDTO(id="1", members=["o"])], options) == 0


def test_avg_without_zero():
    assert avg_without_zero([]) == 0
    assert avg_without_zero([1, 2]) == 1.5


def test_build_report(options):
    report = build_report(ABC + [GroupDTO(id="b")], options)
    assert report.wanted_amount == 2
    assert report.unwanted_amount == 2
    assert report.average_wanted == 1
    assert report.without_wanted == 1
    assert report.group_sizes == {"a": 3, "b": 0}

# -------------------------------
# Set score
# -------------------------------

def test_compare_partitions_prefers_fewer_unwanted(options):
    calm = [GroupDTO(id="1", members=["a", "b"]), GroupDTO(id="2", members=["c", "f"])]
    tense = [GroupDTO(id="1", members=["a", "c"]), GroupDTO(id="2", members=["b", "f"])]
    assert compare_partitions(calm, tense, options) < 0
    assert compare_partitions(tense, calm, options) > 0


def test_compare_partitions_prefers_non_empty(options):
    empty = [GroupDTO(id="1")]
    assert compare_partitions(ABC, empty, options) < 0
    assert compare_partitions(empty, ABC, options) > 0


def test_compare_partitions_with_itself_is_zero(options):
    groups = get_groups(options, random.Random(8))
    assert compare_partitions(groups, groups, options) == 0

# -------------------------------
# Multi-start selection
# -------------------------------

def test_iterations_must_be_positive(options):
    with pytest.raises(ConfigurationError):
        get_groups_iterations(0, options)


def test_options_are_validated_once_per_run(options, monkeypatch):
    calls = []

    def counting(opts):
        calls.append(opts)
        grouping_validate(opts)

    grouping_validate = grouping.validate_options
    monkeypatch.setattr(grouping, "validate_options", counting)
    monkeypatch.setattr(metrics, "validate_options", counting)

    get_groups_iterations(4, options, random.Random(2))

    assert len(calls) == 1


def test_each_attempt_is_logged(options, caplog):
    with caplog.at_level(logging.DEBUG, logger="groupmaker.domain.metrics"):
        get_groups_iterations(3, options, random.Random(5))
    attempts = [r for r in caplog.records if r.name == "groupmaker.domain.metrics" and "Attempt" in r.getMessage()]
    assert len(attempts) == 3


def test_best_is_at_least_as_good_as_every_attempt(options):
    best = get_groups_iterations(8, options, random.Random(11))

    rng = random.Random(11)
    attempts = [get_groups(options, rng) for _ in range(8)]

    assert any(a == best for a in attempts)
    for attempt in attempts:
        assert compare_partitions(best, attempt, options) <= 0


@pytest.mark.parametrize("seed", range(10))
def test_should_have_no_unwanted(options, seed):
    groups = get_groups_iterations(5, options, random.Random(seed))
    assert get_unwanted_amount(groups, options) == 0


@pytest.mark.parametrize("seed", range(10))
def test_should_have_all_users(options, seed):
    groups = get_groups_iterations(10, options, random.Random(seed))
    placed = [m for g in groups for m in g.members]
    assert sorted(placed) == sorted(u.id for u in options.data)


@pytest.mark.parametrize("seed", range(10))
def test_should_have_gender_balance(options, seed):
    groups = [g for g in get_groups_iterations(10, options, random.Random(seed)) if g.members]
    difference = [
        abs(options.group_size / 2 - sum(1 for m in g.members if options.user(m).gender == "male"))
        for g in groups
    ]
    assert sum(difference) / len(groups) <= 1
