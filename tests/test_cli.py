import argparse
import json
from unittest.mock import AsyncMock

import httpx

from tech_trends.cli import api_client
from tech_trends.cli.seed import SAMPLE_TRENDS, seed
from tech_trends.schemas import TrendCreate


async def test_seed_writes_every_trend(trend_repository, trends_table):
    written = await seed(trend_repository, SAMPLE_TRENDS[:3])
    assert written == 3
    assert len(trends_table.items) == 3


async def test_seed_dry_run_writes_nothing(trend_repository, trends_table, capsys):
    written = await seed(trend_repository, SAMPLE_TRENDS[:2], dry_run=True)
    assert written == 0
    assert trends_table.mutations == 0
    assert "[dry-run]" in capsys.readouterr().out


async def test_seed_skips_failures(trend_repository):
    trends = [TrendCreate(name=n, category="Backend", description="x") for n in ("a", "b")]
    real_create = trend_repository.create
    trend_repository.create = AsyncMock(side_effect=[RuntimeError("throttled"), await real_create(trends[1])])
    assert await seed(trend_repository, trends) == 1


def test_sample_trends_are_valid():
    assert len({t.name for t in SAMPLE_TRENDS}) == len(SAMPLE_TRENDS)
    assert all(0 <= t.popularity <= 100 for t in SAMPLE_TRENDS)


def test_settings_update_command_sends_only_given_fields(capsys):
    seen = {}

    def handle(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"settings": {}, "message": "Settings updated"})

    args = argparse.Namespace(display_name=None, bio="hi", theme="dark", notifications="off")
    with httpx.Client(base_url="http://api.test", transport=httpx.MockTransport(handle)) as client:
        assert api_client.cmd_settings_update(client, args) == 0

    assert seen == {
        "method": "PUT",
        "path": "/api/user/settings",
        "body": {"bio": "hi", "theme": "dark", "notifications": False},
    }
    assert "Settings updated" in capsys.readouterr().out


def test_parser_routes_nested_commands():
    args = api_client.build_parser().parse_args(["favorites", "add", "t-1"])
    handler = api_client.HANDLERS[args.command][args.favorites_cmd]
    assert handler is api_client.cmd_favorites_add
    assert args.trend_id == "t-1"
