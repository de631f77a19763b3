import argparse
from pathlib import Path
import sys

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.db.session import create_schema, get_session_factory
from app.services.codes import CodeRegistry


def _parse_code(raw: str) -> str | dict:
    # CODE or CODE:LEAGUES
    code, sep, leagues = raw.partition(":")
    if not sep:
        return code
    return {"code": code, "league_count": int(leagues)}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Add access codes to the code registry.")
    parser.add_argument("codes", nargs="+", help="CODE or CODE:LEAGUE_COUNT")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    create_schema()
    with get_session_factory()() as db:
        summary = CodeRegistry(db).add_codes([_parse_code(raw) for raw in args.codes])
    print(f"Added codes: {summary['added']}, skipped: {summary['skipped']}, errors: {summary['errors']}")


if __name__ == "__main__":
    main()
