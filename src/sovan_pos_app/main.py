from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from datetime import date, datetime
from typing import Any, Sequence

from sovan_pos_sdk import ConfigError, load_config

from sovan_pos_app.app.bootstrap import PosAppBootstrap
from sovan_pos_app.app.state import Route
from sovan_pos_app.ui.dashboard.dashboard_view import summary_payload

logger = logging.getLogger(__name__)


def _print(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def iso_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"tanggal harus berformat YYYY-MM-DD: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sovan-pos", description="Sepatu by Sovan point-of-sale client")
    parser.add_argument("--env-file", default=None, help="Optional .env file with SOVAN_* settings")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    commands = parser.add_subparsers(dest="command", required=True)

    login = commands.add_parser("login", help="Sign in and store the session token")
    login.add_argument("--email", required=True)
    login.add_argument("--password", default=None, help="Prompted when omitted")

    commands.add_parser("logout", help="Remove the stored session token")

    inventory = commands.add_parser("inventory", help="List the product catalogue")
    inventory.add_argument("--search", default="", help="Brand or model, at least 2 characters")
    inventory.add_argument("--size", default="")
    inventory.add_argument("--brand", default=None, help="Show the unit count for one brand")
    inventory.add_argument("--page", type=int, default=1)
    inventory.add_argument("--refresh", action="store_true", help="Ignore the local cache")

    transactions = commands.add_parser("transactions", help="List transactions for a day")
    transactions.add_argument("--date", type=iso_date, default=None, help="YYYY-MM-DD, defaults to today in Asia/Jakarta")
    transactions.add_argument("--method", default="", help="Payment method filter")
    transactions.add_argument("--status", default="", help="Payment status filter")
    transactions.add_argument("--page", type=int, default=1)

    dashboard = commands.add_parser("dashboard", help="Show the dashboard summary")
    dashboard.add_argument("--watch", action="store_true", help="Keep refreshing until interrupted")

    commands.add_parser("visitors", help="Show visitor counts")
    return parser


def _requires_login(bootstrap: PosAppBootstrap, route: Route) -> bool:
    result = bootstrap.navigate(route)
    if result.route is Route.LOGIN:
        _print({"ok": False, "route": result.route.value, "error": result.error_message})
        return True
    return False


def _cmd_login(bootstrap: PosAppBootstrap, args: argparse.Namespace) -> int:
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    result = bootstrap.login(args.email, password)
    _print({"ok": result.error_message is None, "route": result.route.value, "error": result.error_message})
    return 0 if result.error_message is None else 1


def _cmd_logout(bootstrap: PosAppBootstrap, args: argparse.Namespace) -> int:
    result = bootstrap.logout()
    _print({"ok": True, "route": result.route.value})
    return 0


def _cmd_inventory(bootstrap: PosAppBootstrap, args: argparse.Namespace) -> int:
    if _requires_login(bootstrap, Route.INVENTORY):
        return 1
    view = bootstrap.inventory_view()
    loaded = view.refresh() if args.refresh else view.load()
    if loaded and (args.search or args.size):
        loaded = view.search(args.search, args.size)
    if args.brand:
        view.select_brand(args.brand)
    view.goto_page(args.page)
    _print(view.render())
    return 0 if loaded else 1


def _cmd_transactions(bootstrap: PosAppBootstrap, args: argparse.Namespace) -> int:
    if _requires_login(bootstrap, Route.TRANSACTIONS):
        return 1
    view = bootstrap.transaction_list_view()
    loaded = view.set_filters(on_date=args.date, payment_method=args.method, status=args.status)
    view.goto_page(args.page)
    _print(view.render())
    return 0 if loaded else 1


def _cmd_dashboard(bootstrap: PosAppBootstrap, args: argparse.Namespace) -> int:
    if _requires_login(bootstrap, Route.DASHBOARD):
        return 1
    view = bootstrap.dashboard_view()
    if not args.watch:
        ok = view.refresh()
        _print(view.render())
        return 0 if ok else 1
    poller = view.poller
    poller.on_update = lambda summary: _print(summary_payload(summary))
    try:
        poller.run()
    except KeyboardInterrupt:
        logger.info("dashboard_watch_interrupted")
    finally:
        poller.stop()
    return 1 if poller.session_expired else 0


def _cmd_visitors(bootstrap: PosAppBootstrap, args: argparse.Namespace) -> int:
    if _requires_login(bootstrap, Route.VISITORS):
        return 1
    view = bootstrap.visitor_view()
    ok = view.load()
    _print(view.render())
    return 0 if ok else 1


COMMANDS = {
    "login": _cmd_login,
    "logout": _cmd_logout,
    "inventory": _cmd_inventory,
    "transactions": _cmd_transactions,
    "dashboard": _cmd_dashboard,
    "visitors": _cmd_visitors,
}


def run(argv: Sequence[str] | None = None, bootstrap: PosAppBootstrap | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    if bootstrap is None:
        try:
            config = load_config(args.env_file)
        except ConfigError as exc:
            print(f"Configuration error: {exc}", file=sys.stderr)
            return 2
        bootstrap = PosAppBootstrap(config=config)
    bootstrap.start()
    return COMMANDS[args.command](bootstrap, args)


if __name__ == "__main__":
    raise SystemExit(run())
