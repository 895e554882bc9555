"""
Unit tests for deterministic comment ranking.
"""

from insights.pipeline.ranking import format_excerpt, rank_by_likes, rank_by_replies
from tests.conftest import make_items


class TestRanking:

    def test_sorted_by_likes_descending(self):
        items = make_items(5, likes=[3, 9, 1, 7, 5])
        assert [i.likes for i in rank_by_likes(items, 5)] == [9, 7, 5, 3, 1]

    def test_ties_keep_input_order(self):
        items = make_items(6, likes=[5, 10, 5, 10, 5, 1])
        ranked = rank_by_likes(items, 6)
        assert [i.text for i in ranked] == [
            "comment 1", "comment 3", "comment 0", "comment 2", "comment 4", "comment 5",
        ]

    def test_all_equal_weights_preserve_order(self):
        items = make_items(200, likes=[0] * 200)
        ranked = rank_by_likes(items, 150)
        assert ranked == items[:150]

    def test_top_k_truncation(self):
        items = make_items(300)
        ranked = rank_by_likes(items, 150)
        assert len(ranked) == 150
        assert ranked[0].likes == 300
        assert ranked[-1].likes == 151

    def test_fewer_items_than_limit(self):
        assert len(rank_by_likes(make_items(3), 150)) == 3

    def test_rank_by_replies_stable(self):
        items = make_items(4, replies=[2, 8, 2, 0])
        assert [i.text for i in rank_by_replies(items, 3)] == ["comment 1", "comment 0", "comment 2"]

    def test_input_not_mutated(self):
        items = make_items(5, likes=[1, 2, 3, 4, 5])
        rank_by_likes(items, 5)
        assert [i.likes for i in items] == [1, 2, 3, 4, 5]

    def test_format_excerpt(self):
        items = make_items(2, likes=[10, 3])
        assert format_excerpt(items) == "[1] (10 likes) user0: comment 0\n\n[2] (3 likes) user1: comment 1"
