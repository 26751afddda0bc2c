"""
Register the bridge's Discord commands (run once, and again after changing them).

Usage:
    python register_commands.py
    python register_commands.py --dry-run

Needs DISCORD_APPLICATION_ID and DISCORD_BOT_TOKEN (read from .env.local / .env).
"""

import argparse
import json
import sys

import httpx

from cloud_agent_bridge.adapters.discord.discord_commands import COMMANDS
from cloud_agent_bridge.adapters.discord.discord_registration import (
    CommandRegistrationError,
    register_commands,
)
from cloud_agent_bridge.config.logging_config import setup_logging
from cloud_agent_bridge.config.settings import load_registration_settings
from cloud_agent_bridge.domain.exceptions import ConfigurationError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Register Discord application commands")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the command payload instead of sending it",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Log level (default: INFO)",
    )
    args = parser.parse_args(argv)

    if args.dry_run:
        print(json.dumps(COMMANDS, indent=2))
        return 0

    setup_logging(args.log_level)

    try:
        settings = load_registration_settings()
    except ConfigurationError as e:
        print(f"❌ {e.message}", file=sys.stderr)
        return 1

    print("🔄 Registering Discord commands...")
    print(f"   Application ID: {settings.discord_application_id}")
    print(f"   Commands to register: {len(COMMANDS)}")

    try:
        registered = register_commands(settings)
    except (CommandRegistrationError, httpx.HTTPError) as e:
        print("\n❌ Failed to register commands:", file=sys.stderr)
        print(f"   {e}", file=sys.stderr)
        return 1

    print("\n✅ Successfully registered commands:")
    for command in registered:
        print(f"   - /{command.get('name')} (ID: {command.get('id')})")
    print("\n✨ Done! Commands are now available in Discord.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
