"""
Tests for the department breakdown formatter
"""

import asyncio

import pytest
from prometheus_client import REGISTRY

from database.models import Candidate
from server.services.departments import format_departments, get_department_data
from fakes import FakeDatabase, make_vote


def departments(db, reference, top_n=5):
    return asyncio.run(get_department_data(db, reference, top_n))


class TestNoHomeVotes:
    def test_empty_payload_instead_of_division(self, reference, ced):
        db = FakeDatabase(candidates=[ced], votes=[make_vote(ced, "Canada", "Ontario")])

        result = departments(db, reference)

        assert result == {
            "success": True,
            "data": {
                "departments": [],
                "totalVotes": 0,
                "message": "Pa gen vòt Ayiti ankò",
            },
        }


class TestBreakdown:
    def _votes(self, ced, mika, lune):
        return [
            make_vote(ced, "Haiti", "Ouest"),
            make_vote(ced, "Haiti", "Ouest"),
            make_vote(mika, "Haiti", "Ouest"),
            make_vote(mika, "Haiti", "nord-est"),
            make_vote(lune, "Haiti", None),
            make_vote(ced, "Canada", "Ouest"),
        ]

    def test_groups_home_country_by_department(self, reference, ced, mika, lune):
        db = FakeDatabase(candidates=[ced, mika, lune], votes=self._votes(ced, mika, lune))

        data = departments(db, reference)["data"]

        assert data["totalVotes"] == 5
        assert data["departmentCount"] == 3
        ouest = data["departments"][0]
        assert ouest["department"] == "Ouest"
        assert ouest["totalVotes"] == 3
        assert ouest["percentage"] == pytest.approx(60.0)
        assert ouest["topCandidate"] == ced.name
        assert ouest["topCandidatePhoto"] == ced.photo_url
        assert ouest["topCandidateVotes"] == 2
        assert [c["votes"] for c in ouest["candidates"]] == [2, 1]

    def test_region_names_are_canonicalised(self, reference, ced, mika, lune):
        db = FakeDatabase(candidates=[ced, mika, lune], votes=self._votes(ced, mika, lune))
        names = [d["department"] for d in departments(db, reference)["data"]["departments"]]
        assert "Nord-Est" in names

    def test_coverage_and_unspecified(self, reference, ced, mika, lune):
        db = FakeDatabase(candidates=[ced, mika, lune], votes=self._votes(ced, mika, lune))

        data = departments(db, reference)["data"]

        assert data["unspecifiedCount"] == 1
        assert data["coverage"]["specified"] == pytest.approx(80.0)
        assert data["coverage"]["unspecified"] == pytest.approx(20.0)
        assert any(d["department"] == "Non Espesifye" for d in data["departments"])

    def test_missing_departments_listed(self, reference, ced, mika, lune):
        db = FakeDatabase(candidates=[ced, mika, lune], votes=self._votes(ced, mika, lune))
        missing = departments(db, reference)["data"]["missingDepartments"]
        assert len(missing) == 8
        assert "Ouest" not in missing and "Nord-Est" not in missing
        assert "Artibonite" in missing

    def test_member_votes_sum_to_department_total(self, reference, ced, mika, lune):
        votes = [make_vote(c, "Haiti", "Sud") for c in (ced, mika, lune, mika)]
        data = format_departments(votes, reference, top_n=10)["data"]
        (sud,) = data["departments"]
        assert sum(c["votes"] for c in sud["candidates"]) == sud["totalVotes"] == 4


class TestTopCandidates:
    def test_ranking_capped_at_top_n(self, reference):
        candidates = [Candidate(id=i, name=f"Candidate {i}", slug=f"c{i}") for i in range(1, 8)]
        votes = []
        for weight, candidate in enumerate(candidates, start=1):
            votes += [make_vote(candidate, "Haiti", "Nord")] * weight

        (nord,) = format_departments(votes, reference, top_n=5)["data"]["departments"]

        assert [c["id"] for c in nord["candidates"]] == [7, 6, 5, 4, 3]
        assert nord["topCandidate"] == "Candidate 7"

    def test_idempotent(self, reference, ced, mika):
        votes = [make_vote(ced, "Haiti", "Nord"), make_vote(mika, "Haiti", "Sud"), make_vote(mika, "Haiti", None)]
        assert format_departments(votes, reference) == format_departments(votes, reference)


class TestMetrics:
    def test_raw_only_view_never_counts_a_fallback(self, reference, ced):
        db = FakeDatabase(candidates=[ced], votes=[make_vote(ced, "Haiti", "Nord")])

        departments(db, reference)

        sample = REGISTRY.get_sample_value(
            "voteboard_aggregate_fallbacks_total", {"dimension": "department"}
        )
        assert sample is None
