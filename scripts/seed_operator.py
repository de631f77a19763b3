import argparse
from pathlib import Path
import sys

from sqlalchemy import select

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.core.config import get_settings
from app.core.security import hash_password
from app.db.session import create_schema, get_session_factory
from app.models.operator import Operator


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create or update a dashboard operator.")
    parser.add_argument("--login", default=settings.bootstrap_operator_login)
    parser.add_argument("--password", default=settings.bootstrap_operator_password)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    create_schema()
    with get_session_factory()() as db:
        operator = db.scalar(select(Operator).where(Operator.login == args.login))
        action = "updated"
        if operator is None:
            operator = Operator(login=args.login)
            action = "created"
        operator.password_hash = hash_password(args.password)
        db.add(operator)
        db.commit()
    print(f"Operator {args.login} {action}.")


if __name__ == "__main__":
    main()
