"""
Tests for the CLI module.
"""
import json
import os
import tempfile
from datetime import datetime, timezone

import pytest

from vqs.cli import main, parse_args


@pytest.fixture
def candidates_file():
    """Temp JSON file with two keywords of candidates."""
    records = [
        {"videoId": "k1", "views": 5000, "likes": 200, "subscriberCount": 3000,
         "publishedAt": "2025-05-30T00:00:00Z", "durationSeconds": 25,
         "collectionKeyword": "kpop"},
        {"videoId": "k2", "views": 90, "likes": 1, "subscriberCount": 50,
         "publishedAt": "2024-01-01T00:00:00Z", "durationSeconds": 120,
         "collectionKeyword": "kpop"},
        {"videoId": "k3", "views": 800_000, "likes": 40_000, "subscriberCount": 1_500_000,
         "channelVerified": True, "publishedAt": "2025-05-31T00:00:00Z",
         "durationSeconds": 40, "collectionKeyword": "kpop"},
        {"videoId": "m1", "views": 1000, "collectionKeyword": "mukbang"},
    ]
    with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as f:
        json.dump(records, f)
        path = f.name
    yield path
    os.unlink(path)


class TestParseArgs:
    """Tests for argument parsing."""

    def test_search_command(self):
        args = parse_args(["--input", "videos.json", "search", "kpop"])
        assert args.command == "search"
        assert args.keyword == "kpop"
        assert args.limit is None
        assert args.json is False

    def test_search_with_limit(self):
        args = parse_args(["--input", "videos.json", "search", "kpop", "--limit", "5"])
        assert args.limit == 5

    def test_batch_command(self):
        args = parse_args(["--input", "v.json", "batch", "a", "b", "c", "--limit", "20"])
        assert args.keywords == ["a", "b", "c"]
        assert args.limit == 20

    def test_now_parsed(self):
        args = parse_args(["--input", "v.json", "--now", "2025-06-01T00:00:00Z", "keywords"])
        assert args.now == datetime(2025, 6, 1, tzinfo=timezone.utc)

    def test_invalid_now(self):
        with pytest.raises(SystemExit):
            parse_args(["--input", "v.json", "--now", "someday", "keywords"])

    def test_input_required_for_search(self):
        with pytest.raises(SystemExit):
            parse_args(["search", "kpop"])

    def test_show_config_without_input(self):
        args = parse_args(["show-config"])
        assert args.command == "show-config"

    def test_missing_command(self):
        with pytest.raises(SystemExit):
            parse_args(["--input", "v.json"])


class TestMain:
    """End-to-end runs of the CLI entry point."""

    @pytest.mark.asyncio
    async def test_search_json(self, candidates_file, capsys):
        code = await main([
            "--input", candidates_file, "--json", "--now", "2025-06-01T00:00:00Z",
            "search", "kpop", "--limit", "2",
        ])
        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["command"] == "search"
        assert out["success"] is True
        assert out["videoCount"] == 2
        assert out["stats"]["count"] == 3
        assert [v["rank"] for v in out["videos"]] == [1, 2]

    @pytest.mark.asyncio
    async def test_search_text(self, candidates_file, capsys):
        code = await main(["--input", candidates_file, "search", "kpop"])
        assert code == 0
        out = capsys.readouterr().out
        assert "Command: search" in out
        assert "Keyword: kpop [ok]" in out

    @pytest.mark.asyncio
    async def test_search_unknown_keyword(self, candidates_file, capsys):
        code = await main(["--input", candidates_file, "--json", "search", "nothing"])
        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["success"] is False
        assert out["stats"] is None

    @pytest.mark.asyncio
    async def test_batch_json(self, candidates_file, capsys):
        code = await main([
            "--input", candidates_file, "--json", "batch", "kpop", "mukbang", "nothing",
        ])
        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["summary"]["totalKeywords"] == 3
        assert out["summary"]["successful"] == 2
        assert out["summary"]["totalVideos"] == 4

    @pytest.mark.asyncio
    async def test_keywords(self, candidates_file, capsys):
        code = await main(["--input", candidates_file, "--json", "keywords"])
        assert code == 0
        out = json.loads(capsys.readouterr().out)
        counts = {k["keyword"]: k["candidates"] for k in out["keywords"]}
        assert counts == {"kpop": 3, "mukbang": 1}

    @pytest.mark.asyncio
    async def test_show_config(self, capsys, monkeypatch):
        monkeypatch.delenv("VQS_CONFIG", raising=False)
        code = await main(["--json", "show-config"])
        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["config"]["engagementWeight"] == 0.35
        assert out["config"]["sigmoidSteepness"] == 12.0

    @pytest.mark.asyncio
    async def test_invalid_config(self, candidates_file):
        with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as f:
            json.dump({"engagementWeight": 0.9}, f)
            path = f.name
        try:
            code = await main(["--input", candidates_file, "--config", path, "search", "kpop"])
            assert code == 2
        finally:
            os.unlink(path)

    @pytest.mark.asyncio
    async def test_missing_input_file(self):
        code = await main(["--input", "/nonexistent/videos.json", "search", "kpop"])
        assert code == 2
