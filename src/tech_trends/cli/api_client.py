"""CLI to exercise a running tech_trends API.

Usage:
  trends-client health
  trends-client trends list --category Frontend
  trends-client trends get 0b6c...-uuid
  trends-client categories
  trends-client --token "$ACCESS_TOKEN" favorites add <trend-id>
  trends-client --token "$ACCESS_TOKEN" settings update --theme dark
"""
import argparse
import json
import os
import sys

import httpx


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _show(r: httpx.Response) -> int:
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/health"))


def cmd_trends_list(client: httpx.Client, args: argparse.Namespace) -> int:
    params: dict[str, object] = {"limit": args.limit}
    if args.category:
        params["category"] = args.category
    r = client.get("/api/trends", params=params)
    r.raise_for_status()
    data = r.json()
    print(f"Found {data['total']} trends")
    print_json(data["trends"][: args.head] if args.head else data["trends"])
    return 0


def cmd_trends_get(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.get(f"/api/trends/{args.trend_id}"))


def cmd_categories(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/api/categories"))


def cmd_profile(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/api/user/profile"))


def cmd_favorites_list(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/api/user/favorites"))


def cmd_favorites_add(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.post("/api/user/favorites", json={"trendId": args.trend_id}))


def cmd_favorites_remove(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.delete(f"/api/user/favorites/{args.trend_id}"))


def cmd_settings_get(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/api/user/settings"))


def cmd_settings_update(client: httpx.Client, args: argparse.Namespace) -> int:
    payload: dict[str, object] = {}
    if args.display_name is not None:
        payload["displayName"] = args.display_name
    if args.bio is not None:
        payload["bio"] = args.bio
    if args.theme is not None:
        payload["theme"] = args.theme
    if args.notifications is not None:
        payload["notifications"] = args.notifications == "on"
    return _show(client.put("/api/user/settings", json=payload))


def cmd_upload_url(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.post("/api/user/upload-url", json={"contentType": args.content_type}))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Exercise the tech_trends API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default=os.getenv("API_BASE_URL", "http://127.0.0.1:8000"),
        help="API base URL (default: $API_BASE_URL or http://127.0.0.1:8000)",
    )
    parser.add_argument("--token", default=None, help="Bearer token for /api/user routes")
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET /health")
    subparsers.add_parser("categories", help="GET /api/categories")
    subparsers.add_parser("profile", help="GET /api/user/profile")

    trends = subparsers.add_parser("trends", help="Trend catalog (/api/trends)")
    trends_sub = trends.add_subparsers(dest="trends_cmd", required=True)
    p = trends_sub.add_parser("list", help="GET /api/trends")
    p.add_argument("--category", default=None, help="Filter by category")
    p.add_argument("--limit", type=int, default=50, help="Max trends (default: 50)")
    p.add_argument("--head", type=int, default=0, help="Show only first N (0 = all)")
    p = trends_sub.add_parser("get", help="GET /api/trends/{id}")
    p.add_argument("trend_id")

    favorites = subparsers.add_parser("favorites", help="Favorites (/api/user/favorites)")
    favorites_sub = favorites.add_subparsers(dest="favorites_cmd", required=True)
    favorites_sub.add_parser("list", help="GET /api/user/favorites")
    p = favorites_sub.add_parser("add", help="POST /api/user/favorites")
    p.add_argument("trend_id")
    p = favorites_sub.add_parser("remove", help="DELETE /api/user/favorites/{trendId}")
    p.add_argument("trend_id")

    settings = subparsers.add_parser("settings", help="Settings (/api/user/settings)")
    settings_sub = settings.add_subparsers(dest="settings_cmd", required=True)
    settings_sub.add_parser("get", help="GET /api/user/settings")
    p = settings_sub.add_parser("update", help="PUT /api/user/settings")
    p.add_argument("--display-name", default=None)
    p.add_argument("--bio", default=None)
    p.add_argument("--theme", choices=["light", "dark"], default=None)
    p.add_argument("--notifications", choices=["on", "off"], default=None)

    p = subparsers.add_parser("upload-url", help="POST /api/user/upload-url")
    p.add_argument(
        "--content-type",
        default="image/png",
        choices=["image/png", "image/jpeg", "image/gif", "image/webp"],
    )
    return parser


HANDLERS = {
    "health": cmd_health,
    "categories": cmd_categories,
    "profile": cmd_profile,
    "upload-url": cmd_upload_url,
    "trends": {"list": cmd_trends_list, "get": cmd_trends_get},
    "favorites": {
        "list": cmd_favorites_list,
        "add": cmd_favorites_add,
        "remove": cmd_favorites_remove,
    },
    "settings": {"get": cmd_settings_get, "update": cmd_settings_update},
}


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    handler = HANDLERS[args.command]
    if isinstance(handler, dict):
        handler = handler[getattr(args, f"{args.command}_cmd")]

    headers = {"Authorization": f"Bearer {args.token}"} if args.token else {}
    try:
        with httpx.Client(
            base_url=args.base_url.rstrip("/"), timeout=args.timeout, headers=headers
        ) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
