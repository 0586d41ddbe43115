from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from fynd.modules.matches.scoring import (
    DEFAULT_POLICY,
    ScoringPolicy,
    keyword_set,
    orient,
    overlap_ratio,
    score_pair,
    tokenize,
)

BASE = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def item(category, title, description=None, item_type=None, lat=None, lon=None, created_at=BASE):
    return SimpleNamespace(
        category=category,
        title=title,
        description=description,
        item_type=item_type,
        latitude=lat,
        longitude=lon,
        created_at=created_at,
    )


def black_wallet_pair():
    found = item(
        "found",
        "Black leather wallet",
        "Found a black leather wallet near the bus stop",
        item_type="wallet",
        lat=31.77,
        lon=35.21,
        created_at=BASE - timedelta(days=2),
    )
    lost = item(
        "lost",
        "Lost black wallet",
        "Black leather wallet with cards",
        item_type="wallet",
        lat=31.775,
        lon=35.215,
        created_at=BASE,
    )
    return lost, found


def test_tokenize_drops_stop_words_and_single_chars():
    assert tokenize("The black Wallet, a 2nd x") == ["black", "wallet", "2nd"]
    assert tokenize(None) == []


def test_overlap_ratio():
    a = frozenset({"black", "wallet"})
    b = frozenset({"black", "wallet", "leather", "cards"})
    assert overlap_ratio(a, b) == 1.0
    assert overlap_ratio(a, frozenset()) == 0.0


def test_black_wallet_scores_strong_with_all_reasons():
    lost, found = black_wallet_pair()
    result = score_pair(lost, found)
    assert result.score > 50
    assert set(result.reasons) == {"category", "keywords", "location", "date"}
    assert result.distance_km is not None and result.distance_km < 1


def test_black_wallet_breakdown():
    lost, found = black_wallet_pair()
    result = score_pair(lost, found)
    assert result.breakdown["category"] == 30.0
    assert result.breakdown["location"] == 20.0
    # 3 shared tokens out of the smaller set of 5
    assert result.breakdown["keywords"] == 18.0
    assert result.breakdown["date"] == pytest.approx(19.31, abs=0.01)
    assert result.score == pytest.approx(87.31, abs=0.01)


def test_scoring_is_deterministic():
    lost, found = black_wallet_pair()
    assert score_pair(lost, found) == score_pair(lost, found)


def test_wrong_categories_raise():
    lost, found = black_wallet_pair()
    with pytest.raises(ValueError):
        score_pair(found, lost)
    with pytest.raises(ValueError):
        score_pair(lost, lost)


def test_missing_coordinates_give_no_location_points():
    lost = item("lost", "Blue umbrella", item_type="accessories")
    found = item("found", "Blue umbrella", item_type="accessories", lat=31.77, lon=35.21)
    result = score_pair(lost, found)
    assert result.distance_km is None
    assert result.breakdown["location"] == 0.0
    assert "location" not in result.reasons


def test_far_apart_and_old_items_score_low():
    lost = item("lost", "Red bicycle", item_type="vehicles", lat=31.77, lon=35.21, created_at=BASE)
    found = item("found", "Gold ring", item_type="jewelry", lat=32.08, lon=34.78, created_at=BASE - timedelta(days=60))
    result = score_pair(lost, found)
    assert result.score == 0.0
    assert result.reasons == ()


def test_small_contributions_are_not_reasons():
    lost = item("lost", "keys", created_at=BASE)
    found = item("found", "phone", created_at=BASE - timedelta(days=29))
    result = score_pair(lost, found)
    # 20 * (1 - 28/29) is below the reason threshold
    assert 0 < result.breakdown["date"] < DEFAULT_POLICY.reason_min_points
    assert "date" not in result.reasons


def test_custom_policy_weights():
    lost, found = black_wallet_pair()
    policy = ScoringPolicy(category_weight=0, keywords_weight=0, location_weight=100, date_weight=0)
    result = score_pair(lost, found, policy)
    assert result.score == 100.0
    assert result.reasons == ("location",)


def test_keyword_set_combines_title_and_description():
    assert keyword_set(item("lost", "Wallet", "black leather")) == frozenset({"wallet", "black", "leather"})


def test_orient_puts_lost_first():
    lost, found = black_wallet_pair()
    assert orient(found, lost) == (lost, found)
    assert orient(lost, found) == (lost, found)
