# groupmaker/simulation/simulate.py
"""
Simulation script: creates X fake users with random likes and dislikes,
groups them and prints the result.

Uses the service directly.
"""

import logging
import random
from typing import List, Optional

from faker import Faker

from groupmaker.domain.models import Gender, UserDTO
from groupmaker.services.grouping_service import GroupingService

logger = logging.getLogger(__name__)

NUM_USERS = 26
USERS_PER_GROUP = 4
WANTED_PER_USER = 6
UNWANTED_PER_USER = 2
ITERATIONS = 10


def generate_users(
    count: int,
    wanted_per_user: int = WANTED_PER_USER,
    unwanted_per_user: int = UNWANTED_PER_USER,
    seed: Optional[int] = None,
) -> List[UserDTO]:
    """
    Build `count` users named by Faker. Each one wants and dislikes a random
    sample of the others; the two samples never overlap.
    """
    fake = Faker()
    fake.seed_instance(seed)
    rng = random.Random(seed)

    genders = [rng.choice([Gender.male, Gender.female]) for _ in range(count)]
    names = []
    for g in genders:
        name = fake.first_name_male() if g == Gender.male else fake.first_name_female()
        # male and female name lists overlap, and short lists run out
        if name in names:
            name = f"{name}{len(names)}"
        names.append(name)

    users = []
    for name, gender in zip(names, genders):
        others = [n for n in names if n != name]
        picked = rng.sample(others, min(len(others), wanted_per_user + unwanted_per_user))
        users.append(
            UserDTO(
                id=name,
                wanted=picked[:wanted_per_user],
                unwanted=picked[wanted_per_user:],
                gender=gender,
            )
        )
    return users


def run_simulation(
    num_users: int = NUM_USERS,
    group_size: int = USERS_PER_GROUP,
    iterations: int = ITERATIONS,
    seed: Optional[int] = None,
):
    users = generate_users(num_users, seed=seed)
    logger.info("Generated %d users", len(users))

    service = GroupingService(rng=random.Random(seed))
    result = service.make_groups(users, iterations=iterations, group_size=group_size)

    for g in result.groups:
        if g.members:
            print(f"Group {g.id}: {', '.join(g.members)}")
    print(f"Unwanted co-placements: {result.report.unwanted_amount}")
    print(f"Users with a wanted mate: {result.report.wanted_amount}/{len(users)}")
    return result


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_simulation()
