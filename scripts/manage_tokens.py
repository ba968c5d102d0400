"""Utility script to mint, list and revoke registry tokens.

Tokens are normally managed through the API, which itself needs a token; this
script talks to the configured database directly to bootstrap the first one.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from registry_api.auth.tokens import AuthenticatedUser  # noqa: E402
from registry_api.config.settings import get_settings  # noqa: E402
from registry_api.db.migrations import upgrade_database  # noqa: E402
from registry_api.db.session import build_async_engine  # noqa: E402
from registry_api.errors import RegistryError  # noqa: E402
from registry_api.repo.sql import SqlRepository  # noqa: E402
from registry_api.services.tokens_service import TokensService  # noqa: E402


async def create_token(service: TokensService, args: argparse.Namespace) -> None:
    generated = await service.generate_token(args.user_id, args.name)
    print(f"Created token {generated.token.id} for '{args.user_id}'")
    print(generated.key)


async def list_tokens(service: TokensService, args: argparse.Namespace) -> None:
    tokens = await service.list_tokens(AuthenticatedUser(args.user_id))
    for token in tokens.items:
        print(f"{token.id}  {token.name}  {token.created_at.isoformat()}")


async def revoke_token(service: TokensService, args: argparse.Namespace) -> None:
    await service.delete_token(args.token_id, AuthenticatedUser(args.user_id))
    print(f"Revoked token {args.token_id}")


async def _run(args: argparse.Namespace) -> int:
    repository = SqlRepository(build_async_engine(get_settings().database_url))
    try:
        await upgrade_database(repository.engine)
        await args.func(TokensService(repository), args)
    except RegistryError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    finally:
        await repository.close()
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Manage registry API tokens")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Generate a token for a user id")
    create.add_argument("user_id")
    create.add_argument("--name", default="bootstrap")
    create.set_defaults(func=create_token)

    list_cmd = sub.add_parser("list", help="List a user's tokens")
    list_cmd.add_argument("user_id")
    list_cmd.set_defaults(func=list_tokens)

    revoke = sub.add_parser("revoke", help="Delete one of a user's tokens")
    revoke.add_argument("user_id")
    revoke.add_argument("token_id")
    revoke.set_defaults(func=revoke_token)

    args = parser.parse_args()
    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
