import pytest

from skill_swap import models
from skill_swap.models.swap import SwapStatus
from skill_swap.services import reputation_service


@pytest.mark.parametrize("average,completed,expected", [
    (0.0, 0, 0.0),
    (0.0, 1, 2.0),
    (4.0, 3, 86.0),
    (4.5, 10, 100.0),
    (5.0, 0, 100.0),
    (5.0, 50, 100.0),
    (3.0, 25, 80.0),
])
def test_calculate_trust_score(average, completed, expected):
    assert reputation_service.calculate_trust_score(average, completed) == expected


def test_trust_score_is_float():
    assert isinstance(reputation_service.calculate_trust_score(3, 1), float)


def test_recompute_without_reviews(db_session, make_user):
    user = make_user()

    reputation = reputation_service.recompute_reputation(db_session, user.id)

    assert reputation.overall_rating == 0.0
    assert reputation.total_ratings == 0
    assert reputation.completed_swaps == 0
    assert reputation.trust_score == 0.0
    assert reputation.updated_at is not None


def test_recompute_creates_missing_row(db_session, make_user):
    user = make_user()
    db_session.query(models.Reputation).filter_by(user_id=user.id).delete()
    db_session.commit()

    reputation_service.recompute_reputation(db_session, user.id)
    db_session.commit()

    assert db_session.query(models.Reputation).filter_by(user_id=user.id).count() == 1


def test_recompute_averages_reviews_and_counts_completed_swaps(db_session, make_user, make_swap):
    tutor, first, second = make_user(), make_user(), make_user()
    swap_one = make_swap(first, tutor, status=SwapStatus.COMPLETED)
    swap_two = make_swap(tutor, second, status=SwapStatus.COMPLETED)
    make_swap(tutor, first, status=SwapStatus.ACCEPTED)

    db_session.add_all([
        models.Review(
            swap_request_id=swap_one.id, reviewer_id=first.id, reviewee_id=tutor.id,
            overall=5, teaching_quality=4, reliability=5, communication=3,
        ),
        models.Review(
            swap_request_id=swap_two.id, reviewer_id=second.id, reviewee_id=tutor.id,
            overall=3, teaching_quality=2,
        ),
    ])
    db_session.flush()

    reputation = reputation_service.recompute_reputation(db_session, tutor.id)

    assert reputation.overall_rating == 4.0
    assert reputation.teaching_quality == 3.0
    # Dimensions a reviewer skipped do not count toward the average
    assert reputation.reliability == 5.0
    assert reputation.total_ratings == 2
    assert reputation.completed_swaps == 2
    assert reputation.trust_score == 84.0
