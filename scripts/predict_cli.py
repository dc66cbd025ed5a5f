"""CLI script for getting similar users and item recommendations.

Useful for testing and evaluation. Loads the rating data, answers a single
request for a user and prints the result to the console.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Literal

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from simrec.exceptions import SimRecError
from simrec.recommender.infer import (
    DEFAULT_MIN_RATINGS,
    DEFAULT_RESULT_COUNT,
    RecommendationParams,
    recommended_items,
    similar_users,
)
from simrec.recommender.store import POLICY_CONTIGUOUS, USER_POLICIES
from simrec.recommender.utils import load_store_from_dir

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)


def get_results(
    user_id: int,
    data_dir: str = "data",
    results: int = DEFAULT_RESULT_COUNT,
    min_ratings: int = DEFAULT_MIN_RATINGS,
    mode: Literal["items", "users"] = "items",
    user_policy: str = POLICY_CONTIGUOUS,
) -> List[Dict]:
    """Get recommended items or similar users for a user.

    Args:
        user_id: User ID to answer for
        data_dir: Directory with items.csv and ratings.csv
        results: Number of entries to return
        min_ratings: Minimum ratings per recommended item
        mode: "items" for recommendations, "users" for similar users
        user_policy: "contiguous" or "observed" user ids

    Returns:
        List of result dictionaries, best first
    """
    try:
        store = load_store_from_dir(data_dir, user_policy=user_policy)
        params = RecommendationParams(
            user_id=user_id, result_count=results, min_ratings=min_ratings
        )
        if mode == "users":
            return similar_users(store, params)
        return recommended_items(store, params)

    except FileNotFoundError as e:
        print(f"Error: Rating data not found in {data_dir}", file=sys.stderr)
        print(f"  {e}", file=sys.stderr)
        sys.exit(1)
    except SimRecError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)


def main() -> None:
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Get item recommendations or similar users for a user",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/predict_cli.py 42
  python scripts/predict_cli.py 42 --results 5 --min-ratings 3
  python scripts/predict_cli.py 42 --mode users
  python scripts/predict_cli.py 42 --data-dir data/small --user-policy observed
        """
    )

    parser.add_argument(
        "user_id",
        type=int,
        help="User ID to get results for"
    )

    parser.add_argument(
        "--results",
        type=int,
        default=DEFAULT_RESULT_COUNT,
        help=f"Number of results to return (default: {DEFAULT_RESULT_COUNT})"
    )

    parser.add_argument(
        "--min-ratings",
        type=int,
        default=DEFAULT_MIN_RATINGS,
        help=f"Minimum ratings per recommended item (default: {DEFAULT_MIN_RATINGS})"
    )

    parser.add_argument(
        "--mode",
        type=str,
        choices=["items", "users"],
        default="items",
        help="items: recommended items, users: most similar users (default: items)"
    )

    parser.add_argument(
        "--data-dir",
        type=str,
        default="data",
        help="Directory containing items.csv and ratings.csv (default: data)"
    )

    parser.add_argument(
        "--user-policy",
        type=str,
        choices=list(USER_POLICIES),
        default=POLICY_CONTIGUOUS,
        help="Which user ids get a profile (default: contiguous)"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    entries = get_results(
        user_id=args.user_id,
        data_dir=args.data_dir,
        results=args.results,
        min_ratings=args.min_ratings,
        mode=args.mode,
        user_policy=args.user_policy,
    )

    if args.mode == "users":
        print(f"\nUsers most similar to user {args.user_id}:")
        for entry in entries:
            print(f"  {entry['name']:<12} id={entry['userId']:<6} similarity={entry['similarity']:.4f}")
    else:
        print(f"\nRecommendations for user {args.user_id} (min ratings: {args.min_ratings}):")
        for entry in entries:
            print(
                f"  {entry['title']} (id={entry['itemId']}, "
                f"ratings={entry['numRatings']}, score={entry['score']:.4f})"
            )

    if not entries:
        print("  No results.")

    print()


if __name__ == "__main__":
    main()
