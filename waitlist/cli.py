"""Command line entry point: run the server or submit a signup."""

import argparse
import asyncio
import sys

from waitlist.client.form import FormStatus, WaitlistForm
from waitlist.config import get_settings


def serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "waitlist.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )
    return 0


async def _join(url: str, email: str) -> FormStatus:
    form = WaitlistForm(url, alert=lambda message: print(message, file=sys.stderr))
    try:
        status = await form.submit(email)
    finally:
        await form.close()
    if status is FormStatus.JOINED:
        print(f"{form.button_text} ({form.last_message})")
    return status


def join(args: argparse.Namespace) -> int:
    status = asyncio.run(_join(args.url, args.email))
    return 0 if status is FormStatus.JOINED else 1


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="waitlist", description="Waitlist signup service")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Interface to bind (default: {settings.host})",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to listen on (default: {settings.port})",
    )
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve_parser.set_defaults(func=serve)

    join_parser = subparsers.add_parser("join", help="Submit an email to a running server")
    join_parser.add_argument("email", help="Email address to add")
    join_parser.add_argument(
        "--url",
        default=f"http://localhost:{settings.port}/join-waitlist",
        help="Signup endpoint URL",
    )
    join_parser.set_defaults(func=join)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
