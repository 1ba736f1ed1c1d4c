import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional

from pydantic import ValidationError

from groupmaker.config.settings import Settings, settings as default_settings
from groupmaker.domain.errors import ConfigurationError
from groupmaker.domain.metrics import PartitionReport, build_report, get_groups_iterations
from groupmaker.domain.models import GroupDTO, GroupingOptions, UserDTO

logger = logging.getLogger(__name__)


@dataclass
class GroupingResult:
    groups: List[GroupDTO]
    report: PartitionReport
    attempts: int


class GroupingService:
    def __init__(self, settings: Settings = None, rng: random.Random = None):
        self.settings = settings or default_settings
        self.rng = rng or random.Random(self.settings.RANDOM_SEED)

    def build_initial_groups(
        self, population: int, group_size: int, group_count: Optional[int] = None
    ) -> List[GroupDTO]:
        if group_size <= 0:
            raise ConfigurationError(f"group_size must be positive, got {group_size}")
        count = group_count if group_count is not None else self.settings.GROUP_COUNT
        if count is None:
            count = max(1, math.ceil(population / group_size))
        if count <= 0:
            raise ConfigurationError(f"group count must be positive, got {count}")
        return [GroupDTO(id=str(i)) for i in range(1, count + 1)]

    def build_options(
        self,
        users: List[UserDTO],
        group_size: Optional[int] = None,
        desired_wanted_amount: Optional[int] = None,
        group_count: Optional[int] = None,
        strict: bool = False,
    ) -> GroupingOptions:
        group_size = group_size if group_size is not None else self.settings.GROUP_SIZE_DEFAULT
        if desired_wanted_amount is None:
            desired_wanted_amount = self.settings.DESIRED_WANTED_AMOUNT_DEFAULT
        try:
            options = GroupingOptions(
                group_size=group_size,
                desired_wanted_amount=desired_wanted_amount,
                initial_groups=self.build_initial_groups(len(users), group_size, group_count),
                data=users,
                strict=strict,
            )
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

        if not strict:
            stale = sorted(
                {ref for u in users for ref in [*u.wanted, *u.unwanted] if not options.has_user(ref)}
            )
            if stale:
                logger.warning("Ignoring references to unknown users: %s", ", ".join(stale))
        return options

    def make_groups(
        self,
        users: List[UserDTO],
        iterations: Optional[int] = None,
        **overrides,
    ) -> GroupingResult:
        iterations = iterations if iterations is not None else self.settings.ITERATIONS_DEFAULT
        options = self.build_options(users, **overrides)

        logger.info(
            "Grouping %d users into %d groups of %d (%d attempts)",
            len(users),
            len(options.initial_groups),
            options.group_size,
            iterations,
        )
        groups = get_groups_iterations(iterations, options, self.rng)
        report = build_report(groups, options)
        logger.info(
            "Best attempt: unwanted=%d wanted=%d avg_wanted=%.2f without_wanted=%d",
            report.unwanted_amount,
            report.wanted_amount,
            report.average_wanted,
            report.without_wanted,
        )
        return GroupingResult(groups=groups, report=report, attempts=iterations)
