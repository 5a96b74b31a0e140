# truelens/tests/test_scoring.py
from truelens.scoring import reliability_score, verify_claims
from conftest import FakeSearcher

def test_score_without_votes_is_base():
    assert reliability_score([]) == 70

def test_all_claims_corroborated_is_max():
    assert reliability_score([1, 1, 1]) == 100

def test_partial_verification_interpolates():
    assert reliability_score([1, 0, 0]) == 80
    assert reliability_score([1, 1, 0]) == 90
    assert reliability_score([1, 0]) == 85

def test_score_stays_in_bounds():
    for votes in ([0], [1], [0, 0, 0], [1, 0, 1]):
        assert 70 <= reliability_score(votes) <= 100

def test_verify_claims_only_searches_first_three():
    searcher = FakeSearcher(hits={"a": True, "b": False, "c": True, "d": True})
    votes = verify_claims(searcher, ["a", "b", "c", "d"], max_claims=3)
    assert votes == [1, 0, 1]
    assert sorted(searcher.queries) == ["a", "b", "c"]

def test_search_errors_count_as_negative_votes():
    votes = verify_claims(FakeSearcher(fail=True), ["a", "b", "c"])
    assert votes == [0, 0, 0]
    assert reliability_score(votes) == 70

def test_no_claims_no_searches():
    searcher = FakeSearcher()
    assert verify_claims(searcher, []) == []
    assert searcher.queries == []
