"""Recount denormalized like counters from their join tables.

Usage:
  python -m rap_arena.scripts.reconcile_counters            # every kind
  python -m rap_arena.scripts.reconcile_counters --kind posts
  python -m rap_arena.scripts.reconcile_counters --kind posts --id <post id>
"""
from __future__ import annotations

import argparse
import logging
import sys

from rap_arena.core.errors import NotFoundError
from rap_arena.db.session import SessionLocal
from rap_arena.services.kinds import LIKE_KINDS, resolve_kind
from rap_arena.services.reactions import ReactionService

logger = logging.getLogger("rap_arena.reconcile")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--kind",
        choices=sorted(LIKE_KINDS),
        help="Only reconcile this kind (default: all kinds)",
    )
    parser.add_argument("--id", dest="entity_id", help="Only reconcile this entity (needs --kind)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[reconcile] %(message)s")

    if args.entity_id and not args.kind:
        logger.error("--id requires --kind")
        return 2

    kinds = [resolve_kind(LIKE_KINDS, args.kind)] if args.kind else list(LIKE_KINDS.values())
    with SessionLocal() as db:
        for kind in kinds:
            service = ReactionService(db, kind)
            if args.entity_id:
                try:
                    count = service.reconcile(args.entity_id)
                except NotFoundError as exc:
                    logger.error("%s", exc.detail)
                    return 1
                logger.info("%s %s now has %d likes", kind.label, args.entity_id, count)
            else:
                fixed = service.reconcile_all()
                logger.info("%s: corrected %d counters", kind.name, fixed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
