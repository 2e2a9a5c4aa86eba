"""Tests for tie-break deduplication."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from docforest.corpus import InMemoryCorpus
from docforest.hierarchy.dedupe import (
    TieBreakDeduplicator,
    prefer_earliest_position,
    prefer_lowest,
)


def _keep_champion(champion, contender):
    return champion


def _take_contender(champion, contender):
    return contender


@pytest.fixture
def triple() -> InMemoryCorpus:
    return InMemoryCorpus.from_tree(
        [{"id": "A0", "digest": "AAA"}, {"id": "A1", "digest": "AAA"}, {"id": "A2", "digest": "AAA"}]
    )


class TestDeduplicate:
    """Test survivor selection."""

    def test_prefer_earliest_position(self, triple: InMemoryCorpus) -> None:
        """Three records sharing a digest reduce to the one at [0]."""
        records = [triple.get("A2"), triple.get("A0"), triple.get("A1")]

        result = TieBreakDeduplicator(triple).deduplicate(records, prefer_earliest_position(triple))

        assert result == {triple.get("A0")}

    def test_first_seen_is_initial_champion(self, triple: InMemoryCorpus) -> None:
        records = [triple.get("A1"), triple.get("A2"), triple.get("A0")]

        result = TieBreakDeduplicator(triple).deduplicate(records, _keep_champion)

        assert result == {triple.get("A1")}

    def test_contender_replaces_champion(self, triple: InMemoryCorpus) -> None:
        records = [triple.get("A0"), triple.get("A1"), triple.get("A2")]

        result = TieBreakDeduplicator(triple).deduplicate(records, _take_contender)

        assert result == {triple.get("A2")}

    def test_tie_breaker_call_order(self, triple: InMemoryCorpus) -> None:
        a0, a1, a2 = triple.get("A0"), triple.get("A1"), triple.get("A2")
        tie_breaker = MagicMock(side_effect=_take_contender)

        TieBreakDeduplicator(triple).deduplicate([a0, a1, a2], tie_breaker)

        calls = [call.args for call in tie_breaker.call_args_list]
        assert calls == [(a0, a1), (a1, a2)]

    def test_unrelated_return_keeps_champion(self, triple: InMemoryCorpus) -> None:
        """Returning None or another record leaves the champion in place."""
        a0, a1, a2 = triple.get("A0"), triple.get("A1"), triple.get("A2")
        dedupe = TieBreakDeduplicator(triple)

        assert dedupe.deduplicate([a0, a1, a2], lambda champion, contender: None) == {a0}
        assert dedupe.deduplicate([a0, a1], lambda champion, contender: a2) == {a0}
        assert dedupe.deduplicate([a0, a1], lambda champion, contender: "a1") == {a0}

    def test_records_without_digest_pass_through(self) -> None:
        corpus = InMemoryCorpus.from_tree(
            [{"id": "N1"}, {"id": "N2", "digest": "  "}, {"id": "D", "digest": "ddd"}]
        )
        tie_breaker = MagicMock()

        result = TieBreakDeduplicator(corpus).deduplicate(corpus.records(), tie_breaker)

        assert result == {corpus.get("N1"), corpus.get("N2"), corpus.get("D")}
        tie_breaker.assert_not_called()

    def test_case_corpus(self, case_corpus: InMemoryCorpus) -> None:
        records = list(case_corpus.records())

        result = TieBreakDeduplicator(case_corpus).deduplicate(
            records, prefer_earliest_position(case_corpus)
        )

        assert {r.record_id for r in result} == {"PST", "F1", "D1", "D2", "F2", "F3"}

    def test_every_digest_survives_once(self, case_corpus: InMemoryCorpus) -> None:
        records = list(case_corpus.records())

        result = TieBreakDeduplicator(case_corpus).deduplicate(records, _take_contender)

        digests = [case_corpus.digest(r) for r in result if case_corpus.digest(r)]
        assert sorted(digests) == ["aaa", "bbb", "ccc"]
        assert len(result) <= len(records)

    def test_idempotent(self, case_corpus: InMemoryCorpus) -> None:
        dedupe = TieBreakDeduplicator(case_corpus)
        tie_breaker = prefer_earliest_position(case_corpus)

        once = dedupe.deduplicate(case_corpus.records(), tie_breaker)
        twice = dedupe.deduplicate(once, tie_breaker)

        assert twice == once

    def test_empty_input(self, case_corpus: InMemoryCorpus) -> None:
        assert TieBreakDeduplicator(case_corpus).deduplicate([], _keep_champion) == set()

    def test_tie_breaker_errors_propagate(self, triple: InMemoryCorpus) -> None:
        def broken(champion, contender):
            raise RuntimeError("cannot decide")

        with pytest.raises(RuntimeError, match="cannot decide"):
            TieBreakDeduplicator(triple).deduplicate(triple.records(), broken)


class TestGroupByDigest:
    def test_groups_in_input_order(self, case_corpus: InMemoryCorpus) -> None:
        groups = TieBreakDeduplicator(case_corpus).group_by_digest(case_corpus.records())

        assert {k: [r.record_id for r in v] for k, v in groups.items()} == {
            "aaa": ["F1", "D3", "LOOSE"],
            "bbb": ["D1", "D4"],
            "ccc": ["F2"],
        }


class TestTieBreakers:
    def test_prefer_lowest_keeps_champion_on_tie(self, triple: InMemoryCorpus) -> None:
        a0, a1 = triple.get("A0"), triple.get("A1")
        tie_breaker = prefer_lowest(lambda record: 0)

        assert tie_breaker(a0, a1) is a0

    def test_prefer_lowest_by_key(self, triple: InMemoryCorpus) -> None:
        a0, a1 = triple.get("A0"), triple.get("A1")
        tie_breaker = prefer_lowest(lambda record: record.record_id == "A0")

        assert tie_breaker(a0, a1) is a1
        assert tie_breaker(a1, a0) is a1

    def test_prefer_earliest_position_order_independent(self, case_corpus: InMemoryCorpus) -> None:
        records = list(case_corpus.records())
        tie_breaker = prefer_earliest_position(case_corpus)
        dedupe = TieBreakDeduplicator(case_corpus)

        assert dedupe.deduplicate(records, tie_breaker) == dedupe.deduplicate(records[::-1], tie_breaker)


class TestEmptyInputLogging:
    def test_empty_dedupe_warns(
        self, case_corpus: InMemoryCorpus, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="docforest.hierarchy.dedupe"):
            result = TieBreakDeduplicator(case_corpus).deduplicate([], _keep_champion)

        assert result == set()
        assert "No records to deduplicate" in caplog.text
