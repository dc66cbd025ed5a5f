"""Generate fake rating data for testing and development.

This module creates a synthetic item catalog and rating records in the CSV
layout the SimRec service loads: ``items.csv`` (itemId,title) and
``ratings.csv`` (userId,itemId,rating).

Example:
    Run the script directly to generate default data:
        $ python scripts/generate_fake_data.py

    Or import and use programmatically:
        from scripts.generate_fake_data import generate_fake_ratings
        items, ratings = generate_fake_ratings(num_users=100, num_items=200)
"""

import argparse
import random
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd

# Default configuration constants
DEFAULT_NUM_USERS = 50
DEFAULT_NUM_ITEMS = 100
DEFAULT_NUM_RATINGS = 1000
DEFAULT_SEED = 42

# Half-star rating scale, 0.5 to 5.0
RATING_SCALE = [step / 2 for step in range(1, 11)]

_ADJECTIVES = ["Silent", "Crimson", "Last", "Hidden", "Broken", "Golden", "Distant", "Wild"]
_NOUNS = ["River", "Empire", "Garden", "Signal", "Harbor", "Winter", "Machine", "Orchard"]


def generate_fake_ratings(
    num_users: int = DEFAULT_NUM_USERS,
    num_items: int = DEFAULT_NUM_ITEMS,
    num_ratings: int = DEFAULT_NUM_RATINGS,
    seed: Optional[int] = DEFAULT_SEED,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Generate a synthetic item catalog and rating records.

    Every user id from 1 to ``num_users`` gets at least one rating, so the
    user ids are contiguous. Each (user, item) pair is rated at most once.

    Args:
        num_users: Number of users to simulate. Must be positive.
        num_items: Number of items in the catalog. Must be positive.
        num_ratings: Number of rating records. Must be at least
            ``num_users`` and at most ``num_users * num_items``.
        seed: Random seed for reproducible output; None for a random run.

    Returns:
        A tuple of two DataFrames:
            - items with columns itemId, title
            - ratings with columns userId, itemId, rating, sorted by userId

    Raises:
        ValueError: If a count is non-positive or ``num_ratings`` is out of range.
    """
    if num_users <= 0 or num_items <= 0 or num_ratings <= 0:
        raise ValueError("num_users, num_items, and num_ratings must be positive")
    if num_ratings < num_users:
        raise ValueError("num_ratings must be at least num_users")
    if num_ratings > num_users * num_items:
        raise ValueError("num_ratings cannot exceed num_users * num_items")

    rng = random.Random(seed)

    items = pd.DataFrame(
        {
            "itemId": range(1, num_items + 1),
            "title": [
                f"{rng.choice(_ADJECTIVES)} {rng.choice(_NOUNS)} ({rng.randint(1950, 2024)})"
                for _ in range(num_items)
            ],
        }
    )

    rated = set()
    # One rating per user first, so no user id is left out
    for user_id in range(1, num_users + 1):
        rated.add((user_id, rng.randint(1, num_items)))

    while len(rated) < num_ratings:
        rated.add((rng.randint(1, num_users), rng.randint(1, num_items)))

    ratings = pd.DataFrame(
        [
            {"userId": user_id, "itemId": item_id, "rating": rng.choice(RATING_SCALE)}
            for user_id, item_id in sorted(rated)
        ]
    )

    return items, ratings


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate fake SimRec rating data.")
    parser.add_argument("--num-users", type=int, default=DEFAULT_NUM_USERS)
    parser.add_argument("--num-items", type=int, default=DEFAULT_NUM_ITEMS)
    parser.add_argument("--num-ratings", type=int, default=DEFAULT_NUM_RATINGS)
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    parser.add_argument(
        "--output-dir",
        type=str,
        default=str(Path(__file__).parent.parent / "data"),
        help="Directory for items.csv and ratings.csv (default: ./data)",
    )
    return parser.parse_args()


def main() -> None:
    """Generate fake data and save it to the output directory.

    Prints summary statistics upon completion.
    """
    args = parse_arguments()

    print(f"Generating {args.num_ratings} fake ratings...")
    print(f"Users: {args.num_users}, Items: {args.num_items}")

    try:
        items, ratings = generate_fake_ratings(
            num_users=args.num_users,
            num_items=args.num_items,
            num_ratings=args.num_ratings,
            seed=args.seed,
        )
    except ValueError as e:
        print(f"Error generating data: {e}")
        return

    data_dir = Path(args.output_dir)
    data_dir.mkdir(parents=True, exist_ok=True)

    items.to_csv(data_dir / "items.csv", index=False)
    ratings.to_csv(data_dir / "ratings.csv", index=False)

    print(f"\nData generated successfully!")
    print(f"Saved to: {data_dir}")
    print(f"\nRatings preview:")
    print(ratings.head(10))
    print(f"\nData summary:")
    print(f"  Total ratings: {len(ratings)}")
    print(f"  Unique users: {ratings['userId'].nunique()}")
    print(f"  Items rated: {ratings['itemId'].nunique()} of {len(items)}")
    print(f"  Mean rating: {ratings['rating'].mean():.2f}")


if __name__ == "__main__":
    main()
