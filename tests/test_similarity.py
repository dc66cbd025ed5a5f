"""Tests for user-user similarity and the neighbor ranking."""

import itertools

import pytest

from simrec.exceptions import UnknownUserError
from simrec.recommender.similarity import euclidean_similarity, rank_similar_users
from simrec.recommender.store import Item, RatingRecord, build_store


def test_scenario_similarities(scenario_store):
    u1, u2, u3 = (scenario_store.get_profile(user_id) for user_id in (1, 2, 3))

    # distance(U1, U2) = (5-4)^2 + (3-2)^2 = 2
    assert euclidean_similarity(u1, u2) == pytest.approx(1 / 3)
    # only M1 shared: distance(U1, U3) = (5-1)^2 = 16
    assert euclidean_similarity(u1, u3) == pytest.approx(1 / 17)


def test_similarity_is_symmetric(random_store):
    profiles = [random_store.get_profile(user_id) for user_id in random_store.all_user_ids()]

    for a, b in itertools.combinations(profiles, 2):
        assert euclidean_similarity(a, b) == euclidean_similarity(b, a)


def test_similarity_range_and_zero_iff_no_shared_items(random_store):
    profiles = [random_store.get_profile(user_id) for user_id in random_store.all_user_ids()]

    for a, b in itertools.combinations(profiles, 2):
        similarity = euclidean_similarity(a, b)
        shared = set(a.ratings) & set(b.ratings)

        assert 0.0 <= similarity <= 1.0
        assert (similarity == 0.0) == (not shared)


def test_identical_shared_scores_give_similarity_one():
    store = build_store(
        [Item(1, "A"), Item(2, "B"), Item(3, "C")],
        [
            RatingRecord(1, 1, 4.0),
            RatingRecord(1, 2, 2.5),
            RatingRecord(2, 1, 4.0),
            RatingRecord(2, 2, 2.5),
            RatingRecord(2, 3, 1.0),
        ],
    )

    assert euclidean_similarity(store.get_profile(1), store.get_profile(2)) == 1.0


def test_empty_profile_has_zero_similarity():
    store = build_store(
        [Item(1, "A")],
        [RatingRecord(1, 1, 4.0), RatingRecord(3, 1, 4.0)],
    )

    # user 2 exists with no ratings under the contiguous policy
    assert euclidean_similarity(store.get_profile(1), store.get_profile(2)) == 0.0


def test_rank_similar_users_scenario(scenario_store):
    ranked = rank_similar_users(scenario_store, 1)

    assert [result.user_id for result in ranked] == [2, 3]
    assert [result.name for result in ranked] == ["User 2", "User 3"]
    assert ranked[0].similarity == pytest.approx(0.3333, abs=1e-4)
    assert ranked[1].similarity == pytest.approx(0.0588, abs=1e-4)


def test_rank_excludes_target_and_covers_everyone_else(random_store):
    total_users = len(random_store.all_user_ids())

    for user_id in random_store.all_user_ids():
        ranked = rank_similar_users(random_store, user_id)

        assert user_id not in [result.user_id for result in ranked]
        assert len(ranked) == total_users - 1


def test_rank_is_non_increasing(random_store):
    for user_id in random_store.all_user_ids():
        similarities = [result.similarity for result in rank_similar_users(random_store, user_id)]

        assert similarities == sorted(similarities, reverse=True)


def test_rank_ties_break_by_ascending_user_id():
    items = [Item(1, "A"), Item(2, "B")]
    ratings = [
        RatingRecord(1, 1, 3.0),
        # users 4, 2 and 5 are equally close to user 1
        RatingRecord(4, 1, 4.0),
        RatingRecord(2, 1, 2.0),
        RatingRecord(5, 1, 4.0),
        # user 3 shares nothing with user 1
        RatingRecord(3, 2, 5.0),
    ]
    store = build_store(items, ratings)

    ranked = rank_similar_users(store, 1)

    assert [result.user_id for result in ranked] == [2, 4, 5, 3]
    assert ranked[-1].similarity == 0.0


def test_rank_is_deterministic(random_store):
    first = rank_similar_users(random_store, 5)
    second = rank_similar_users(random_store, 5)

    assert first == second


def test_rank_unknown_user(scenario_store):
    with pytest.raises(UnknownUserError):
        rank_similar_users(scenario_store, 42)
