"""Tests for the sequential fallback resolver."""
import pytest
import requests

from reelysave.errors import ResolutionFailed
from reelysave.models import MediaCandidate
from reelysave.resolver import MediaResolver, Strategy


def test_first_success_short_circuits(counting_strategy, video_candidate):
    first = counting_strategy(result=video_candidate)
    second = counting_strategy(result=MediaCandidate(display_url="https://cdn/other.jpg"))
    resolver = MediaResolver([Strategy("first", first), Strategy("second", second)])

    candidate = resolver.resolve("ABC123xyz")

    assert candidate.download_url == "https://cdn/x.mp4"
    assert candidate.source == "first"
    assert first.calls == ["ABC123xyz"]
    assert second.calls == []


@pytest.mark.parametrize("error", [
    requests.ConnectionError("connection refused"),
    requests.Timeout("read timed out"),
    requests.HTTPError("404 Not Found"),
    ValueError("Expecting value: line 1 column 1"),
    KeyError("shortcode_media"),
])
def test_strategy_errors_fall_through(counting_strategy, error, image_candidate):
    failing = counting_strategy(error=error)
    working = counting_strategy(result=image_candidate)
    resolver = MediaResolver([Strategy("failing", failing), Strategy("working", working)])

    candidate = resolver.resolve("ABC")

    assert candidate.source == "working"
    assert len(failing.calls) == 1
    assert len(working.calls) == 1


def test_unusable_candidates_fall_through(counting_strategy, video_candidate):
    empty = counting_strategy(result=None)
    blank = counting_strategy(result=MediaCandidate(is_video=False))
    last = counting_strategy(result=video_candidate)
    resolver = MediaResolver([Strategy("empty", empty), Strategy("blank", blank), Strategy("last", last)])

    assert resolver.resolve("ABC").source == "last"
    assert len(empty.calls) == len(blank.calls) == len(last.calls) == 1


def test_exhaustion_raises_resolution_failed(counting_strategy):
    strategies = [
        counting_strategy(error=requests.ConnectionError("down")),
        counting_strategy(result=None),
        counting_strategy(result=MediaCandidate()),
    ]
    resolver = MediaResolver([Strategy(f"s{i}", s) for i, s in enumerate(strategies)])

    with pytest.raises(ResolutionFailed) as exc_info:
        resolver.resolve("ABC")

    error = exc_info.value.to_dict()
    assert error["success"] is False
    assert error["error"]
    assert error["code"] == "resolution_failed"
    assert all(len(s.calls) == 1 for s in strategies)


def test_no_strategies_raises_resolution_failed():
    with pytest.raises(ResolutionFailed):
        MediaResolver([]).resolve("ABC")


def test_names_follow_priority_order():
    resolver = MediaResolver([Strategy("graphql", None), Strategy("embed", None), Strategy("page", None)])
    assert resolver.names == ["graphql", "embed", "page"]


def test_video_without_video_url_falls_through(counting_strategy, video_candidate):
    thumbnail_only = counting_strategy(result=MediaCandidate(display_url="https://cdn/thumb.jpg", is_video=True))
    fallback = counting_strategy(result=video_candidate)
    resolver = MediaResolver([Strategy("graphql", thumbnail_only), Strategy("embed", fallback)])

    candidate = resolver.resolve("ABC")

    assert candidate.source == "embed"
    assert candidate.download_url == "https://cdn/x.mp4"
    assert len(fallback.calls) == 1
