"""Tests for theme keyword extraction."""

from agents.theme_agent import extract_themes, segment_weight


def _scores(themes):
    return {t.name: t.score for t in themes}


class TestSegmentWeight:
    """Tests for positional weights."""

    def test_weights(self):
        """Test weight decreases with depth and bottoms out at 1."""
        assert [segment_weight(i) for i in range(6)] == [4, 3, 2, 1, 1, 1]


class TestExtractThemes:
    """Tests for extract_themes."""

    def test_top_level_weighs_more(self):
        """Test words at position 0 outscore the same words at position 2."""
        shallow = _scores(extract_themes(["https://x.com/red-shoes"]))
        deep = _scores(extract_themes(["https://x.com/shop/catalog/red-shoes"]))
        assert shallow["red"] == 4
        assert shallow["shoes"] == 4
        assert deep["red"] == 2
        assert deep["shoes"] == 2

    def test_scores_accumulate_across_urls(self):
        """Test scores sum over all URLs and segments."""
        scores = _scores(
            extract_themes(
                [
                    "https://x.com/shop/red-shoes",
                    "https://x.com/shop/blue-shoes",
                ]
            )
        )
        assert scores["shop"] == 8
        assert scores["shoes"] == 6
        assert scores["red"] == 3

    def test_short_segments_dropped_before_positioning(self):
        """Test segments of two characters or fewer neither count nor shift positions."""
        scores = _scores(extract_themes(["https://x.com/en/us/guides"]))
        assert scores == {"guides": 4}

    def test_stopwords_and_numbers_dropped(self):
        """Test stopwords (any case) and numeric words are removed."""
        scores = _scores(
            extract_themes(
                [
                    "https://x.com/The-Art-of-War",
                    "https://x.com/2024/post-123-hello",
                ]
            )
        )
        assert "the" not in scores
        assert "of" not in scores
        assert "2024" not in scores
        assert "123" not in scores
        assert scores["art"] == 4
        assert scores["war"] == 4
        assert scores["post"] == 3
        assert scores["hello"] == 3

    def test_number_like_words_dropped(self):
        """Test exponent, hex, octal, binary, leading-dot and Infinity words count as numbers."""
        scores = _scores(
            extract_themes(
                [
                    "https://x.com/1e5-shoes/Infinity",
                    "https://x.com/0x1f-.5-0o17-0b101-2.-boots",
                ]
            )
        )
        assert scores == {"shoes": 4, "boots": 4}

    def test_number_like_but_not_numeric_kept(self):
        """Test words that only look numeric in other casings are kept."""
        scores = _scores(extract_themes(["https://x.com/infinity-nan-3d"]))
        assert scores == {"infinity": 4, "nan": 4, "3d": 4}

    def test_underscores_split_and_lowercased(self):
        """Test underscores split words and names are lowercased."""
        scores = _scores(extract_themes(["https://x.com/Summer_SALE"]))
        assert scores == {"summer": 4, "sale": 4}

    def test_ties_keep_first_seen_order(self):
        """Test equal scores keep extraction order."""
        themes = extract_themes(["https://x.com/zeta", "https://x.com/alpha", "https://x.com/mid"])
        assert [t.name for t in themes] == ["zeta", "alpha", "mid"]

    def test_at_most_thirty_sorted(self):
        """Test output is capped at 30 and sorted non-increasing."""
        urls = [f"https://x.com/section/topic{i:02d}" for i in range(40)]
        urls += ["https://x.com/popular"] * 3
        themes = extract_themes(urls)

        assert len(themes) == 30
        scores = [t.score for t in themes]
        assert scores == sorted(scores, reverse=True)
        assert all(isinstance(s, int) and s >= 0 for s in scores)
        assert themes[0].name == "section"

    def test_limit_argument(self):
        """Test a custom limit."""
        themes = extract_themes(["https://x.com/alpha/beta/gamma"], limit=2)
        assert [t.name for t in themes] == ["alpha", "beta"]

    def test_invalid_urls_skipped(self):
        """Test invalid URLs are ignored and empty input is fine."""
        assert extract_themes([]) == []
        assert _scores(extract_themes(["nope", "https://x.com/valid"])) == {"valid": 4}
