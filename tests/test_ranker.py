"""Tests for rank assignment and top-N selection."""
from datetime import datetime, timezone

import pytest

from vqs.scoring.models import CandidateVideo, NormalizedMetrics, RawMetrics, ScoredVideo
from vqs.scoring.ranker import assign_ranks, select_top, sort_by_score


def _scored(video_id, score, views=0, published_at=None):
    return ScoredVideo(
        video=CandidateVideo(video_id=video_id, views=views, published_at=published_at),
        raw=RawMetrics(0.0, 0.0, 0.0, 0.0),
        normalized=NormalizedMetrics(0.5, 0.5, 0.5, 0.5),
        score=score,
    )


def _ids(videos):
    return [v.video_id for v in videos]


class TestAssignRanks:
    def test_sorted_descending(self):
        batch = [_scored("a", 30), _scored("b", 90), _scored("c", 60)]
        ranked = assign_ranks(batch)
        assert _ids(ranked) == ["b", "c", "a"]
        assert [v.rank for v in ranked] == [1, 2, 3]

    def test_ties_keep_batch_order(self):
        batch = [_scored("a", 50), _scored("b", 70), _scored("c", 50), _scored("d", 50)]
        ranked = assign_ranks(batch)
        assert _ids(ranked) == ["b", "a", "c", "d"]
        assert [v.rank for v in ranked] == [1, 2, 3, 4]

    def test_ranks_dense_and_unique(self):
        batch = [_scored(str(i), s) for i, s in enumerate([5, 80, 80, 12, 99, 0, 50])]
        ranked = assign_ranks(batch)
        assert [v.rank for v in ranked] == list(range(1, len(batch) + 1))
        scores = [v.score for v in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_input_not_mutated(self):
        batch = [_scored("a", 10), _scored("b", 20)]
        assign_ranks(batch)
        assert _ids(batch) == ["a", "b"]
        assert all(v.rank is None for v in batch)

    def test_empty(self):
        assert assign_ranks([]) == []


class TestTieBreak:
    def test_views_tie_break(self):
        batch = [_scored("a", 50, views=10), _scored("b", 50, views=500), _scored("c", 60)]
        assert _ids(sort_by_score(batch, "views")) == ["c", "b", "a"]

    def test_recency_tie_break(self):
        old = datetime(2024, 1, 1, tzinfo=timezone.utc)
        new = datetime(2025, 1, 1, tzinfo=timezone.utc)
        batch = [_scored("a", 50, published_at=old), _scored("b", 50, published_at=new),
                 _scored("c", 50)]
        assert _ids(sort_by_score(batch, "recency")) == ["b", "a", "c"]

    def test_full_tie_falls_back_to_batch_order(self):
        batch = [_scored("a", 50, views=7), _scored("b", 50, views=7), _scored("c", 50, views=7)]
        assert _ids(sort_by_score(batch, "views")) == ["a", "b", "c"]

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            sort_by_score([_scored("a", 1)], "random")


class TestSelectTop:
    def _batch(self):
        return [_scored(str(i), s) for i, s in enumerate([40, 90, 10, 70, 55])]

    def test_truncates_to_limit(self):
        top = select_top(self._batch(), limit=2)
        assert _ids(top) == ["1", "3"]
        assert [v.rank for v in top] == [1, 2]

    def test_prefix_of_full_ranking(self):
        batch = self._batch()
        full = assign_ranks(batch)
        for limit in range(1, len(batch) + 1):
            assert select_top(batch, limit) == full[:limit]

    def test_limit_larger_than_batch(self):
        assert len(select_top(self._batch(), limit=500)) == 5

    def test_non_positive_limit_returns_all(self):
        assert len(select_top(self._batch(), limit=0)) == 5
        assert len(select_top(self._batch(), limit=-3)) == 5

    def test_none_limit_returns_all(self):
        assert len(select_top(self._batch(), limit=None)) == 5
