"""
Tests for the candidate comparison formatter

Exercises the cached and raw tiers. Totals and the country spread pick
their tier independently; the two totals always share one.
"""

import asyncio

import pytest
from prometheus_client import REGISTRY

from database.models import AggregateRow, Candidate
from server.services.compare import format_compare, get_compare_data, group_by_country
from fakes import FakeDatabase, make_vote


def compare(db, candidate):
    return asyncio.run(get_compare_data(candidate, db))


class TestRawFallback:
    def test_candidate_without_aggregate_counts_raw_votes(self, ced, mika, lune):
        votes = [make_vote(ced, "Haiti"), make_vote(ced, "Canada"), make_vote(ced, "Haiti")]
        votes += [make_vote(mika, "Haiti")] * 4 + [make_vote(lune, "France")] * 3
        db = FakeDatabase(candidates=[ced, mika, lune], votes=votes)

        result = compare(db, ced)

        assert result["total_votes"] == 3
        assert result["percentage"] == pytest.approx(30.0)
        assert result["country_count"] == 2
        assert result["top_countries"][0] == {
            "country": "Haiti",
            "votes": 2,
            "percentage": pytest.approx(200 / 3),
        }

    def test_partial_cache_is_not_mixed_with_raw_counts(self, ced, mika):
        # Aggregates know about mika only; ced's figures must all come from votes
        votes = [make_vote(ced, "Haiti")] * 3 + [make_vote(mika, "Haiti")] * 7
        aggregates = [AggregateRow(total_votes=5, candidate_id=mika.id, candidate_slug="mika")]
        db = FakeDatabase(candidates=[ced, mika], votes=votes, aggregates=aggregates)

        result = compare(db, ced)

        assert result["total_votes"] == 3
        assert result["percentage"] == pytest.approx(30.0)

    def test_no_votes_anywhere(self, ced):
        db = FakeDatabase(candidates=[ced])

        result = compare(db, ced)

        assert result["total_votes"] == 0
        assert result["percentage"] == 0.0
        assert result["country_count"] == 0
        assert result["top_countries"] == []

    def test_null_country_grouped_as_unknown(self, ced):
        db = FakeDatabase(candidates=[ced], votes=[make_vote(ced, None), make_vote(ced, "Chile")])
        result = compare(db, ced)
        assert {c["country"] for c in result["top_countries"]} == {"Unknown", "Chile"}


class TestCachedTier:
    def _db(self, ced, mika):
        aggregates = [
            AggregateRow(total_votes=40, candidate_id=ced.id, candidate_slug="ced"),
            AggregateRow(total_votes=60, candidate_id=mika.id, candidate_slug="mika"),
        ]
        by_country = [
            AggregateRow(total_votes=30, candidate_id=ced.id, candidate_slug="ced", country="Haiti"),
            AggregateRow(total_votes=10, candidate_id=ced.id, candidate_slug="ced", country="United States"),
            AggregateRow(total_votes=60, candidate_id=mika.id, candidate_slug="mika", country="Haiti"),
        ]
        # Raw votes deliberately disagree with the cache
        votes = [make_vote(ced, "Haiti")]
        return FakeDatabase(candidates=[ced, mika], votes=votes, aggregates=aggregates, by_country=by_country)

    def test_uses_precomputed_totals(self, ced, mika):
        db = self._db(ced, mika)

        result = compare(db, ced)

        assert result["total_votes"] == 40
        assert result["percentage"] == pytest.approx(40.0)
        assert result["country_count"] == 2
        assert [c["country"] for c in result["top_countries"]] == ["Haiti", "United States"]
        assert result["top_countries"][0]["percentage"] == pytest.approx(75.0)
        assert "count_votes" not in db.votes.calls
        assert "get_votes" not in db.votes.calls

    def test_payload_carries_candidate_identity(self, ced, mika):
        result = compare(self._db(ced, mika), ced)
        assert (result["id"], result["name"], result["slug"], result["photo_url"]) == (
            7, "Ced Lamour", "ced", "https://img.example/ced.jpg",
        )

    def test_empty_country_slice_keeps_cached_totals(self, ced, mika):
        aggregates = [
            AggregateRow(total_votes=2, candidate_id=ced.id, candidate_slug="ced"),
            AggregateRow(total_votes=4, candidate_id=mika.id, candidate_slug="mika"),
        ]
        votes = [make_vote(ced, "Haiti"), make_vote(mika, "Haiti"), make_vote(mika, "Haiti")]
        db = FakeDatabase(candidates=[ced, mika], votes=votes, aggregates=aggregates)

        result = compare(db, ced)

        assert result["total_votes"] == 2
        assert result["percentage"] == pytest.approx(100 / 3)
        assert "count_votes" not in db.votes.calls
        # Only the country spread is rebuilt from raw votes
        assert db.votes.calls == ["get_votes"]
        assert result["top_countries"] == [{"country": "Haiti", "votes": 1, "percentage": pytest.approx(50.0)}]

    def test_fallbacks_counted_per_dimension(self, ced, mika):
        def fallbacks(dimension):
            value = REGISTRY.get_sample_value(
                "voteboard_aggregate_fallbacks_total", {"dimension": dimension}
            )
            return value or 0.0

        aggregates = [AggregateRow(total_votes=5, candidate_id=ced.id, candidate_slug="ced")]
        db = FakeDatabase(candidates=[ced, mika], votes=[make_vote(ced, "Chile")], aggregates=aggregates)
        before = fallbacks("candidate"), fallbacks("country")

        compare(db, ced)

        assert (fallbacks("candidate"), fallbacks("country")) == (before[0], before[1] + 1)


class TestFormatCompare:
    def test_zero_candidate_votes_gives_zero_country_share(self):
        candidate = Candidate(id=1, name="A", slug="a")
        groups = group_by_country([AggregateRow(total_votes=0, country="Haiti")], precounted=True)

        result = format_compare(candidate, 0, 0, groups)

        assert result["percentage"] == 0.0
        assert result["top_countries"] == [{"country": "Haiti", "votes": 0, "percentage": 0.0}]

    def test_idempotent(self, ced, mika):
        votes = [make_vote(ced, c) for c in ("Haiti", "Chile", "Haiti")] + [make_vote(mika, "Chile")]
        db = FakeDatabase(candidates=[ced, mika], votes=votes)
        assert compare(db, ced) == compare(db, ced)
