import pytest
from conftest import FakeResponse

import agents.youtube_trends as yt
from agents.errors import APIError, MissingAPIKey, NoResults, QuotaExceeded
from agents.youtube_trends import TrendResearcher, iso8601_duration_to_seconds, to_trending_video


def _item(vid, views, likes="100"):
    return {
        "id": vid,
        "snippet": {
            "title": f"Title {vid}",
            "channelTitle": "Chan",
            "publishedAt": "2024-05-01T00:00:00Z",
            "thumbnails": {"default": {"url": "d.jpg"}, "high": {"url": "h.jpg"}},
        },
        "statistics": {"viewCount": str(views), "likeCount": likes, "commentCount": "7"},
        "contentDetails": {"duration": "PT1M5S"},
    }


def _fake_get(search_items, detail_items, seen=None):
    def fake_get(url, params=None, timeout=None):
        if seen is not None:
            seen.append((url, dict(params)))
        if url == yt.YOUTUBE_SEARCH_URL:
            return FakeResponse({"items": search_items})
        return FakeResponse({"items": detail_items})

    return fake_get


def test_iso8601_duration():
    assert iso8601_duration_to_seconds("PT1H2M3S") == 3723
    assert iso8601_duration_to_seconds("PT45S") == 45
    assert iso8601_duration_to_seconds("") == 0
    assert iso8601_duration_to_seconds("garbage") == 0


def test_to_trending_video_mapping():
    v = to_trending_video(_item("abc12345678", 5000, likes="250"))
    assert v["url"] == "https://www.youtube.com/watch?v=abc12345678"
    assert v["caption"] == "Title abc12345678"
    assert v["author"] == "Chan"
    assert v["thumbnail"] == "h.jpg"
    assert v["views"] == 5000
    assert v["likes"] == 250
    assert v["shares"] == 25
    assert v["comments"] == 7
    assert v["duration"] == 65


def test_missing_stats_default_to_zero():
    v = to_trending_video({"id": "x", "snippet": {}})
    assert v["views"] == 0 and v["likes"] == 0 and v["duration"] == 0


def test_search_sorts_by_views_and_keeps_top_five(monkeypatch):
    search_items = [{"id": {"videoId": f"v{i:010d}"}} for i in range(12)]
    detail_items = [_item(f"v{i:010d}", views=i * 10) for i in range(10)]
    seen = []
    monkeypatch.setattr(yt.requests, "get", _fake_get(search_items, detail_items, seen))

    videos = TrendResearcher(api_key="k").search("ai tools")

    assert len(videos) == 5
    assert [v["views"] for v in videos] == [90, 80, 70, 60, 50]
    search_params = seen[0][1]
    assert search_params["q"] == "ai tools"
    assert search_params["order"] == "relevance"
    assert search_params["maxResults"] == 20
    assert search_params["key"] == "k"
    # only the first ten ids are looked up
    assert len(seen[1][1]["id"].split(",")) == 10


def test_search_no_hits(monkeypatch):
    monkeypatch.setattr(yt.requests, "get", _fake_get([], []))
    with pytest.raises(NoResults, match="No videos found"):
        TrendResearcher(api_key="k").search("zzz")


def test_search_no_details(monkeypatch):
    monkeypatch.setattr(yt.requests, "get", _fake_get([{"id": {"videoId": "v0000000001"}}], []))
    with pytest.raises(NoResults, match="No video details found"):
        TrendResearcher(api_key="k").search("zzz")


def test_popular_passes_chart_params(monkeypatch):
    seen = []
    monkeypatch.setattr(yt.requests, "get", _fake_get([], [_item("p0000000001", 1)], seen))
    videos = TrendResearcher(api_key="k").popular(category_id="10", region_code="GB", max_results=3)
    assert len(videos) == 1
    params = seen[0][1]
    assert params["chart"] == "mostPopular"
    assert params["videoCategoryId"] == "10"
    assert params["regionCode"] == "GB"
    assert params["maxResults"] == 3


def test_popular_empty(monkeypatch):
    monkeypatch.setattr(yt.requests, "get", _fake_get([], []))
    with pytest.raises(NoResults, match="No popular videos found"):
        TrendResearcher(api_key="k").popular()


def test_missing_key():
    with pytest.raises(MissingAPIKey) as ei:
        TrendResearcher().search("x")
    assert str(ei.value) == (
        "YouTube API key not configured. Please add YOUTUBE_API_KEY to your environment variables."
    )


def test_upstream_error_keeps_status(monkeypatch):
    monkeypatch.setattr(
        yt.requests,
        "get",
        lambda *a, **k: FakeResponse({"error": {"message": "quotaExceeded"}}, 403),
    )
    with pytest.raises(APIError) as ei:
        TrendResearcher(api_key="k").search("x")
    assert ei.value.status_code == 403
    assert str(ei.value) == "YouTube search failed: 403 - quotaExceeded"


def test_rate_limit_blocks_following_calls(monkeypatch):
    calls = {"n": 0}

    def fake_get(*a, **k):
        calls["n"] += 1
        return FakeResponse({}, 429, headers={"Retry-After": "30"})

    monkeypatch.setattr(yt.requests, "get", fake_get)
    r = TrendResearcher(api_key="k")
    with pytest.raises(QuotaExceeded):
        r.search("x")
    with pytest.raises(QuotaExceeded):
        r.popular()
    assert calls["n"] == 1


def test_test_mode_returns_canned_videos(monkeypatch):
    monkeypatch.setenv("YOUTUBE_TEST_MODE", "1")

    def boom(*a, **k):
        raise AssertionError("no network in test mode")

    monkeypatch.setattr(yt.requests, "get", boom)
    videos = TrendResearcher().search("street food")
    assert len(videos) == 5
    assert all(len(v["id"]) == 11 for v in videos)
    assert "street food" in videos[0]["caption"]
    assert len(TrendResearcher().popular(max_results=2)) == 2


def test_trending_video_keys_match_mapping():
    from agents.types import TrendingVideo

    assert set(TrendingVideo.__annotations__) == set(to_trending_video(_item("k0000000001", 1)))
