"""
GCal MCP CLI entry point.

Usage:
    python -m gcal_mcp                # Run MCP server
    python -m gcal_mcp serve          # Run MCP server
    python -m gcal_mcp verify         # Check the access token against the API

The access token is read from GOOGLE_ACCESS_TOKEN.
"""

import argparse
import asyncio
import logging
import sys

import httpx

from gcal_mcp.api.client import CalendarAPIError, GoogleCalendarClient, get_client
from gcal_mcp.settings import settings


logger = logging.getLogger("gcal_mcp")


def configure_logging(level: str) -> None:
    """Log to stderr; stdout belongs to the stdio transport."""
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def verify_credentials(client: GoogleCalendarClient) -> dict:
    """
    Verify the access token by fetching the primary calendar.

    Returns profile info on success.
    """
    try:
        calendar = await client.get_calendar("primary")
        colors = await client.list_colors()
    finally:
        await client.aclose()

    return {
        "email": calendar.get("id"),  # Primary calendar ID is the email
        "calendar_name": calendar.get("summary"),
        "timezone": calendar.get("timeZone"),
        "event_colors": len(colors.get("event", {})),
    }


def run_verify() -> int:
    try:
        profile = asyncio.run(verify_credentials(get_client()))
    except (CalendarAPIError, httpx.HTTPError) as e:
        print(f"Verification failed: {e}", file=sys.stderr)
        return 1

    print(f"Authorized as {profile['email']} ({profile['calendar_name']})")
    print(f"Time zone: {profile['timezone']}")
    print(f"Event colors available: {profile['event_colors']}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        prog="gcal-mcp",
        description="Google Calendar MCP server (bearer access token)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")
    subparsers.add_parser("serve", help="Run MCP server")
    subparsers.add_parser("verify", help="Check access token against Calendar API")

    args = parser.parse_args()

    configure_logging(settings.log_level)

    if args.command == "verify":
        sys.exit(run_verify())

    elif args.command in ("serve", None):
        # Default to serve if no command given
        from gcal_mcp.server import serve
        try:
            serve()
        except CalendarAPIError as e:
            logger.error(f"Cannot start server: {e}")
            sys.exit(1)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
