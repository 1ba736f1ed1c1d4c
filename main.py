# main.py
"""
Command line entrypoint. Splits a roster into groups.

Usage:
    python main.py roster.json --group-size 4 --iterations 20 --seed 7
    python main.py --simulate 26
"""
import argparse
import logging
import random
import sys

from groupmaker.config.settings import settings
from groupmaker.domain.errors import GroupingException
from groupmaker.infrastructure.repositories.user_repo import UserRepo
from groupmaker.services.grouping_service import GroupingService
from groupmaker.simulation.simulate import generate_users

logger = logging.getLogger("groupmaker")


def build_parser():
    parser = argparse.ArgumentParser(description="Split users into groups by their preferences")
    parser.add_argument("roster", nargs="?", help="JSON file with a list of users")
    parser.add_argument("--group-size", type=int, default=settings.GROUP_SIZE_DEFAULT)
    parser.add_argument("--desired-wanted", type=int, default=settings.DESIRED_WANTED_AMOUNT_DEFAULT)
    parser.add_argument("--iterations", type=int, default=settings.ITERATIONS_DEFAULT)
    parser.add_argument("--groups", type=int, default=settings.GROUP_COUNT, help="Number of group slots")
    parser.add_argument("--seed", type=int, default=settings.RANDOM_SEED)
    parser.add_argument("--strict", action="store_true", help="Reject references to unknown users")
    parser.add_argument("--simulate", type=int, metavar="N", help="Use N generated users instead of a roster")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    if args.roster is None and args.simulate is None:
        logger.error("Give a roster file or --simulate N")
        return 1

    try:
        if args.simulate is not None:
            users = generate_users(args.simulate, seed=args.seed)
        else:
            users = UserRepo.from_json_file(args.roster).list_all()

        service = GroupingService(rng=random.Random(args.seed))
        result = service.make_groups(
            users,
            iterations=args.iterations,
            group_size=args.group_size,
            desired_wanted_amount=args.desired_wanted,
            group_count=args.groups,
            strict=args.strict,
        )
    except GroupingException as e:
        logger.error(e)
        return 1

    for g in result.groups:
        if g.members:
            print(f"Group {g.id}: {', '.join(g.members)}")

    report = result.report
    print()
    print(f"Users with a wanted mate: {report.wanted_amount}/{len(users)}")
    print(f"Unwanted co-placements:   {report.unwanted_amount}")
    print(f"Average wanted per user:  {report.average_wanted:.2f}")
    print(f"Users without wanted:     {report.without_wanted}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
