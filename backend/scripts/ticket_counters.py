from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from pathlib import Path

# Script entrypoint: ensure `backend/` is importable.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from eventpos.core.config import get_settings  # noqa: E402
from eventpos.core.db import create_engine, create_session_factory  # noqa: E402
from eventpos.core.enums import TicketCategory  # noqa: E402
from eventpos.services.audit import audit_log  # noqa: E402
from eventpos.services.ticket_numbers import (  # noqa: E402
    SqlCounterStore,
    list_ticket_counters,
    reset_ticket_counter,
    resolve_category,
)


logger = logging.getLogger("ticket_counters")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect or reset ticket number counters.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="Print every counter and the code it will issue next.")

    reset = sub.add_parser("reset", help="Set a counter back to 0 so the next code is 001/0001.")
    reset.add_argument("category", help=", ".join(c.value for c in TicketCategory))
    reset.add_argument("--actor", default=None, help="Name recorded in the audit log (default: OS user).")
    return parser.parse_args(argv)


async def _main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    engine = create_engine()
    session_factory = create_session_factory(engine)
    try:
        if args.command == "show":
            async with session_factory() as session:
                counters = await list_ticket_counters(session)
            if not counters:
                print("No ticket counters yet.")
            for c in counters:
                print(f"{c.category.value:<8} current={c.current_number:<5} next={c.next_ticket_number}  updated_at={c.updated_at.isoformat()}")
            return 0

        try:
            category, fmt = resolve_category(args.category)
        except ValueError as e:
            print(str(e), file=sys.stderr)
            return 2

        ok = await reset_ticket_counter(SqlCounterStore(session_factory), category)
        if not ok:
            print(f"Resetting counter '{category.value}' failed; see log output.", file=sys.stderr)
            return 1

        async with session_factory() as session, session.begin():
            await audit_log(
                session,
                actor=args.actor or getpass.getuser(),
                entity_type="ticket_counter",
                entity_key=category.value,
                action="reset",
                after={"current_number": 0},
            )
        print(f"Counter '{category.value}' reset; next code is {fmt.format(1)}.")
        return 0
    finally:
        await engine.dispose()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(_main()))
