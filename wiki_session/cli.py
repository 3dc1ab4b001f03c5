"""
Command-line interface for wiki_session.

Logs the bot in and runs a single API call, printing the JSON result.
"""

import argparse
import getpass
import json
import logging
import sys

from wiki_session.config import (
    DEFAULT_API_PATH,
    DEFAULT_BASE_URL,
    DEFAULT_PASSWORD,
    DEFAULT_USER,
    Credentials,
    env_flag,
)
from wiki_session.exceptions import WikiSessionError
from wiki_session.logging_setup import log, setup_logging
from wiki_session.network.client import Transport
from wiki_session.session import WikiSession


def _key_value(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got {raw!r}")
    return key, value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Log a MediaWiki bot account in and call the action API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Credentials can also be provided via WIKI_BASE_URL, WIKI_BOT_USERNAME,\n"
            "WIKI_BOT_PASSWORD and WIKI_PRIVATE.  If the password is not supplied\n"
            "and not in the environment, you will be prompted for it."
        ),
    )
    parser.add_argument(
        "--base-url", default=DEFAULT_BASE_URL,
        help="Wiki base URL, e.g. https://wiki.example.com/w/",
    )
    parser.add_argument(
        "--user", default=DEFAULT_USER,
        help="Bot username (Special:BotPasswords name, e.g. MyBot@task)",
    )
    parser.add_argument(
        "--password", default=DEFAULT_PASSWORD,
        help="Bot password (overrides WIKI_BOT_PASSWORD env var)",
    )
    parser.add_argument(
        "--private", action="store_true", default=env_flag("WIKI_PRIVATE"),
        help="Wiki requires login for reads",
    )
    parser.add_argument(
        "--no-verify-ssl", dest="verify_ssl", action="store_false", default=True,
        help="Disable TLS certificate verification (use for self-signed certs)",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("login", help="Log in and report whether it worked")
    for name, verb in (("get", "GET"), ("post", "POST")):
        cmd = sub.add_parser(name, help=f"Log in, then {verb} PATH with key=value fields")
        cmd.add_argument("path", nargs="?", default=DEFAULT_API_PATH,
                         help=f"API path relative to the base URL (default: {DEFAULT_API_PATH})")
        cmd.add_argument("fields", nargs="*", type=_key_value, metavar="key=value")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for the CLI.
    """
    args = parse_args(argv)

    setup_logging(debug=args.debug)

    if args.debug:
        logging.getLogger("urllib3").setLevel(logging.DEBUG)

    if not args.verify_ssl:
        import urllib3
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        log.warning("TLS certificate verification is DISABLED (--no-verify-ssl)")

    if not args.password:
        args.password = getpass.getpass("Bot password: ")

    wiki = WikiSession(
        Credentials(
            base_url=args.base_url,
            bot_username=args.user,
            bot_password=args.password,
            private=args.private,
        ),
        transport=Transport(verify_ssl=args.verify_ssl),
    )

    try:
        result = wiki.login()
        if not result:
            sys.exit(1)
        if args.command == "login":
            log.info("Login OK")
            return

        fields = dict(args.fields)
        if args.command == "get":
            body = wiki.get(args.path, fields)
        else:
            body = wiki.post(args.path, fields)
    except WikiSessionError as exc:
        log.error("%s failed: %s", args.command.upper(), exc)
        sys.exit(1)
    finally:
        wiki.logout()
        wiki.transport.close()

    print(json.dumps(body, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
