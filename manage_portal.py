#!/usr/bin/env python3
"""
Operator commands for the request portal database.

Lets club operators prepare the database and change moderation data
from a shell, without going through the admin API.  Connection
settings come from the same environment variables as the server
(``DATABASE_URL``, ``DATABASE_NAME`` ...).

Usage:
    python manage_portal.py init-db
    python manage_portal.py blacklist list
    python manage_portal.py blacklist add --name 홍길동 --student-number 10203
    python manage_portal.py blacklist remove --student-number 24s10203
    python manage_portal.py applications open
    python manage_portal.py applications close --message "지원 기간이 아닙니다."
"""

import argparse
import asyncio
import sys

from pydantic import ValidationError
from pymongo.errors import PyMongoError

from broadcast_portal_api.app.core.db import init_db
from broadcast_portal_api.app.schemas.application import ApplicationValidity
from broadcast_portal_api.app.schemas.moderation import BlacklistEntryCreate
from broadcast_portal_api.app.services.moderation_service import ModerationService


async def _blacklist(args) -> int:
    if args.action == "list":
        for entry in await ModerationService.list_blacklist():
            print(f"{entry.student_number}\t{entry.name}")
        return 0
    if args.action == "add":
        if not args.name or not args.student_number:
            print("[!] --name and --student-number are required", file=sys.stderr)
            return 1
        entry = await ModerationService.add_to_blacklist(
            BlacklistEntryCreate(name=args.name, student_number=args.student_number)
        )
        print(f"[+] Blacklisted {entry.student_number} ({entry.name})")
        return 0
    if not args.student_number:
        print("[!] --student-number is required", file=sys.stderr)
        return 1
    try:
        await ModerationService.remove_from_blacklist(args.student_number)
    except ValueError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 2
    print(f"[+] Removed {args.student_number} from blacklist")
    return 0


async def _applications(args) -> int:
    if args.action == "status":
        flag = await ModerationService.get_application_validity()
    else:
        flag = await ModerationService.set_application_validity(
            ApplicationValidity(is_valid=args.action == "open", message=args.message or "")
        )
    state = "open" if flag.is_valid else "closed"
    print(f"Application intake is {state}" + (f": {flag.message}" if flag.message else ""))
    return 0


def main() -> int:
    ap = argparse.ArgumentParser(description="Manage request portal moderation data.")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create indexes and seed singleton documents")

    bl = sub.add_parser("blacklist", help="Inspect or change the blacklist")
    bl.add_argument("action", choices=["list", "add", "remove"])
    bl.add_argument("--name")
    bl.add_argument("--student-number")

    apps = sub.add_parser("applications", help="Open or close application intake")
    apps.add_argument("action", choices=["status", "open", "close"])
    apps.add_argument("--message", help="Shown to applicants while intake is closed")

    args = ap.parse_args()
    try:
        if args.command == "init-db":
            init_db()
            print("[+] Database initialised")
            return 0
        if args.command == "blacklist":
            return asyncio.run(_blacklist(args))
        return asyncio.run(_applications(args))
    except ValidationError as e:
        print(f"[!] Invalid input: {e}", file=sys.stderr)
        return 1
    except PyMongoError as e:
        print(f"[!] Database error: {e}", file=sys.stderr)
        return 3


if __name__ == "__main__":
    sys.exit(main())
