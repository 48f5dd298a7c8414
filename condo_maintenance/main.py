from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from condo_maintenance.domain.calendar import InvalidDateError, to_date
from condo_maintenance.domain.filters import ActivityFilters
from condo_maintenance.infra.db import init_db
from condo_maintenance.infra.logging import setup_logging
from condo_maintenance.infra.repository import ActivityRepository
from condo_maintenance.services.activity_service import ActivityService
from condo_maintenance.services.notification_service import NotificationService
from condo_maintenance.services.occurrence_service import OccurrenceService

logger = logging.getLogger(__name__)

BOARD_TITLES = {
    "PROXIMAS": "Próximas",
    "EM_ANDAMENTO": "Em andamento",
    "PENDENTE": "Pendente",
    "HISTORICO": "Histórico",
}


def _day(value: str) -> date:
    try:
        return to_date(value)
    except InvalidDateError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _add_scope(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--company-id", type=int, help="Company scope")
    parser.add_argument("--condominium-id", type=int, help="Condominium scope")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="condo-maintenance",
        description="Maintenance activity scheduling for condominiums",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    notifications = subparsers.add_parser("notifications", help="List due, upcoming and overdue activities")
    _add_scope(notifications)
    notifications.add_argument("--lead-days", type=int, help="Look-ahead window in days")
    notifications.add_argument("--date", type=_day, help="Reference day (default: today)")

    board = subparsers.add_parser("board", help="Group activities by their status on a day")
    _add_scope(board)
    board.add_argument("--date", type=_day, help="Reference day (default: today)")

    cal = subparsers.add_parser("calendar", help="Expected days of one activity")
    cal.add_argument("activity_id", type=int)
    cal.add_argument("--start", type=_day, required=True)
    cal.add_argument("--end", type=_day, required=True)

    mark = subparsers.add_parser("mark", help="Record the status of one occurrence")
    mark.add_argument("activity_id", type=int)
    mark.add_argument("reference_date", type=_day)
    mark.add_argument("--status", default="FEITO", help="Occurrence status (default: FEITO)")
    mark.add_argument("--notes")

    return parser


def _filters(args: argparse.Namespace) -> ActivityFilters:
    return ActivityFilters(company_id=args.company_id, condominium_id=args.condominium_id)


def cmd_notifications(service: NotificationService, args: argparse.Namespace) -> int:
    notices = service.list_notifications(_filters(args), lead_days=args.lead_days, today=args.date)
    if not notices:
        print("No notifications.")
        return 0
    for notice in notices:
        print(f"[{notice.when.value}] {notice.due_date.isoformat()} {notice.title} - {notice.details}")
    return 0


def cmd_board(service: ActivityService, args: argparse.Namespace) -> int:
    columns = service.board(_filters(args), args.date)
    for status, activities in columns.items():
        print(f"{BOARD_TITLES[status.value]} ({len(activities)})")
        for activity in activities:
            print(f"  #{activity.id} {activity.name}")
    return 0


def cmd_calendar(service: ActivityService, args: argparse.Namespace) -> int:
    if args.end < args.start:
        print("Error: --end must not be before --start", file=sys.stderr)
        return 1
    for entry in service.calendar(args.activity_id, args.start, args.end):
        print(f"{entry.day.isoformat()} {entry.code}")
    return 0


def cmd_mark(service: OccurrenceService, args: argparse.Namespace) -> int:
    try:
        record = service.record_occurrence(
            args.activity_id, args.reference_date, args.status, args.notes
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Activity #{record.activity_id} {record.reference_date.isoformat()} -> {record.status.value}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    setup_logging("DEBUG" if args.verbose else None)
    try:
        init_db()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Database is not reachable")
        print(f"DB error: {exc}", file=sys.stderr)
        return 1

    repo = ActivityRepository()
    if args.command == "notifications":
        return cmd_notifications(NotificationService(repo), args)
    if args.command == "board":
        return cmd_board(ActivityService(repo), args)
    if args.command == "calendar":
        return cmd_calendar(ActivityService(repo), args)
    return cmd_mark(OccurrenceService(repo), args)


if __name__ == "__main__":
    sys.exit(main())
