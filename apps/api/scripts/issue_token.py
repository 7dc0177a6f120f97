"""Issue or inspect RTC access tokens from the command line during development."""
from __future__ import annotations

import argparse
import asyncio
import json
from typing import Sequence

from fastapi import HTTPException

from token_server.core.config import settings
from token_server.services import rtc as rtc_service
from token_server.tokens import AccessTokenError, Role, decode_access_token, verify_access_token


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description=__doc__)
	commands = parser.add_subparsers(dest="command", required=True)

	issue = commands.add_parser("issue", help="issue a token using the configured credentials")
	issue.add_argument("--channel", required=True)
	issue.add_argument("--uid", type=int, default=0)
	issue.add_argument("--role", choices=[role.name.lower() for role in Role], default="publisher")
	issue.add_argument("--ttl", type=int, default=None, help="override TOKEN_TTL_SECONDS")

	inspect = commands.add_parser("inspect", help="decode a token and print its fields")
	inspect.add_argument("token")
	inspect.add_argument("--verify", action="store_true", help="check the signature and expiry")

	return parser


async def run_issue(args: argparse.Namespace) -> dict:
	issued = await rtc_service.issue_token(
		args.channel, args.uid, Role[args.role.upper()], user_id="cli", ttl_seconds=args.ttl
	)
	return {
		"token": issued.token,
		"appId": issued.app_id,
		"channelName": issued.channel_name,
		"uid": issued.uid,
		"expiresAt": issued.expires_at,
	}


def run_inspect(args: argparse.Namespace) -> dict:
	if args.verify:
		decoded = verify_access_token(args.token, settings.agora_app_certificate)
	else:
		decoded = decode_access_token(args.token)
	return {
		"appId": decoded.app_id,
		"channelName": decoded.channel_name,
		"uid": decoded.uid,
		"salt": decoded.salt,
		"createdAt": decoded.created_at,
		"privileges": {str(key): value for key, value in sorted(decoded.privileges.items())},
		"verified": bool(args.verify),
	}


async def main(argv: Sequence[str] | None = None) -> int:
	args = build_parser().parse_args(argv)
	try:
		result = await run_issue(args) if args.command == "issue" else run_inspect(args)
	except AccessTokenError as exc:
		print(f"error: {exc}")
		return 1
	except HTTPException as exc:
		print(f"error: {exc.detail}")
		return 1
	print(json.dumps(result, indent=2))
	return 0


if __name__ == "__main__":
	raise SystemExit(asyncio.run(main()))
