# main.py
"""Command line entry point.

Examples:
    python main.py validate greenhouse acme
    python main.py add-source --company-id 7 --type lever --identifier acme
    python main.py sync 3
    python main.py sync-all
    python main.py extract --company-id 7
    python main.py seed-technologies
"""
from __future__ import annotations

import argparse
import json
import sys

from app.database import SessionLocal, engine
from app.logger import configure_logging
from app.models import Base


def _print(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def cmd_validate(args) -> int:
    from connectors.base import ImportSourceConfig
    from connectors.registry import UnsupportedSourceType, resolve

    try:
        connector = resolve(args.source_type)
    except UnsupportedSourceType as e:
        print(f"ERROR: {e}")
        return 2
    result = connector.validate_config(
        ImportSourceConfig(source_type=args.source_type, source_identifier=args.identifier, source_url=args.url)
    )
    _print(result.model_dump())
    return 0 if result.valid else 1


def cmd_add_source(args, db) -> int:
    from app import crud
    from app.schemas import ImportSourceIn
    from connectors.registry import UnsupportedSourceType

    try:
        source = crud.create_source(
            db,
            ImportSourceIn(
                company_id=args.company_id,
                source_type=args.source_type,
                source_identifier=args.identifier,
                source_url=args.url,
            ),
        )
    except UnsupportedSourceType as e:
        print(f"ERROR: {e}")
        return 2
    print(f"Added source {source.id} ({source.source_type}:{source.source_identifier})")
    return 0


def cmd_sync(args, db) -> int:
    from app.sync import sync_source

    result = sync_source(db, args.source_id)
    _print(result.model_dump())
    return 0 if result.success else 1


def cmd_sync_all(args, db) -> int:
    from app.sync import sync_all_sources

    results = sync_all_sources(db)
    _print({sid: r.model_dump() for sid, r in results.items()})
    return 0 if all(r.success for r in results.values()) else 1


def cmd_extract(args, db) -> int:
    from app.tech_extractor import extract_technologies_for_all_jobs, extract_technologies_for_company

    if args.company_id is not None:
        result = extract_technologies_for_company(db, args.company_id)
    else:
        result = extract_technologies_for_all_jobs(db)
    _print(result.model_dump())
    return 0


def cmd_seed_technologies(args, db) -> int:
    from app.tech_extractor import seed_technologies

    print(f"Seeded {seed_technologies(db)} technologies")
    return 0


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Sync job postings from company job sources.")
    sub = p.add_subparsers(dest="command", required=True)

    v = sub.add_parser("validate", help="Check a source configuration without storing it.")
    v.add_argument("source_type")
    v.add_argument("identifier", nargs="?", default="")
    v.add_argument("--url", default=None, help="Optional careers page URL.")

    a = sub.add_parser("add-source", help="Register a job source for a company.")
    a.add_argument("--company-id", type=int, required=True)
    a.add_argument("--type", dest="source_type", required=True)
    a.add_argument("--identifier", required=True)
    a.add_argument("--url", default=None)

    s = sub.add_parser("sync", help="Fetch and reconcile one source.")
    s.add_argument("source_id", type=int)

    sub.add_parser("sync-all", help="Fetch and reconcile every source.")

    e = sub.add_parser("extract", help="Refresh technology mentions for active jobs.")
    e.add_argument("--company-id", type=int, default=None)

    sub.add_parser("seed-technologies", help="Insert the built-in technology list.")
    return p.parse_args(argv)


COMMANDS = {
    "add-source": cmd_add_source,
    "sync": cmd_sync,
    "sync-all": cmd_sync_all,
    "extract": cmd_extract,
    "seed-technologies": cmd_seed_technologies,
}


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging()

    if args.command == "validate":
        return cmd_validate(args)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        return COMMANDS[args.command](args, db)
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
