#!/usr/bin/env python3
"""Assignment board from the terminal.

Loads the board over the REST API (HttpItemStore), applies filters, and
optionally assigns or unassigns items. Authenticates with AGENT_API_KEY.

Usage:
    python scripts/board_cli.py show [--search acme] [--status PENDING] [--unassigned]
    python scripts/board_cli.py assign --items 4 5 6 --user 12
    python scripts/board_cli.py unassign --items 4 5

Exit code is 0 on success, 1 when the load or the command failed.
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.assignments import AssignmentsData  # noqa: E402
from app.connectors.item_store import HttpItemStore  # noqa: E402
from app.constants import UNASSIGNED  # noqa: E402
from app.logging_config import setup_logging  # noqa: E402


def _print_board(board: AssignmentsData) -> None:
    workloads = board.user_workloads
    print(f"Unassigned ({len(board.unassigned_items)})")
    for group in board.groups:
        pending = [i for i in group.items if i.assigned_to_id is None]
        if not pending:
            continue
        print(f"  [{group.effective_priority or '-'}] {group.title} / {group.customer_name}")
        for item in pending:
            print(f"      #{item.id} {item.name} x{item.quantity} {item.unit or ''} ({item.status})")
    print()
    for user in board.users:
        w = workloads[user.id]
        print(f"{user.name} [{user.role}] pending={w.pending} completed={w.completed} total={w.total}")
        for item in board.assigned_items:
            if str(item.assigned_to_id) == str(user.id):
                print(f"      #{item.id} {item.name} ({item.status})")


def _print_notices(board: AssignmentsData) -> None:
    for notice in board.notifier.drain():
        print(f"{notice.level.upper()}: {notice.message}", file=sys.stderr)


async def run(args, store: HttpItemStore | None = None) -> int:
    store = store or HttpItemStore(base_url=args.api)
    board = AssignmentsData(store)
    try:
        if not await board.load():
            _print_notices(board)
            return 1

        if args.command == "show":
            board.set_filters(
                search=args.search,
                customer_id=args.customer,
                inquiry_id=args.inquiry,
                priority=args.priority,
                status=args.status,
                assigned_to_id=UNASSIGNED if args.unassigned else args.assignee,
            )
            _print_board(board)
            return 0

        user_id = args.user if args.command == "assign" else None
        ok = await board.assign_items(args.items, user_id)
        _print_notices(board)
        return 0 if ok else 1
    finally:
        await store.aclose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inquiry assignment board")
    parser.add_argument("--api", default=None, help="API base URL (default: API_BASE_URL)")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Print the board")
    show.add_argument("--search", default="")
    show.add_argument("--customer", default="")
    show.add_argument("--inquiry", default="")
    show.add_argument("--priority", default="")
    show.add_argument("--status", default="")
    show.add_argument("--assignee", default="")
    show.add_argument("--unassigned", action="store_true")

    assign = sub.add_parser("assign", help="Assign items to a user")
    assign.add_argument("--items", nargs="+", type=int, required=True)
    assign.add_argument("--user", type=int, required=True)

    unassign = sub.add_parser("unassign", help="Unassign items")
    unassign.add_argument("--items", nargs="+", type=int, required=True)

    return parser


def main():
    args = build_parser().parse_args()
    setup_logging()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
