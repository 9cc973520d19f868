# Main Entry Point - Command Line Interface
#
# Secure personal key-value storage vault.
#
#   yor set KEY VALUE [--no-password] [--type data/str] [--db NAME]
#   yor get KEY [--out PATH] [--db NAME]
#   yor ls | ls-db | ls-file | create | delete | set-db | rem | clear
#
# Every fatal condition prints a colored message and exits with status 1.

import argparse
import sys
from typing import List, Optional

from . import __version__, console
from .core import (
    EventSeverity,
    EventType,
    VaultConfig,
    VaultEnvironment,
    configure_audit_logger,
    get_audit_logger,
)
from .vault import VaultItemEngine
from .vault.exceptions import MissingDatabase, PasswordMismatch, VaultException

SET_PASSWORD_PROMPT = "[yor] password to be set: "
CONFIRM_PASSWORD_PROMPT = "[yor] confirm password: "

BANNER = (
    "▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄\n"
    "█░██░█▀▄▄▀█░▄▄▀█\n"
    "█░▀▀░█░██░█░▀▀▄█\n"
    "█▀▀▀▄██▄▄██▄█▄▄█\n"
    "▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀\n"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yor",
        description="Secure personal Key-Value storage system",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Yor v{__version__}"
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    sub.add_parser("about", help="Information about the app")
    sub.add_parser("ls-db", help="List all databases available")
    sub.add_parser("ls-file", help="List all files available from the file environment")
    sub.add_parser("load-env", help="Create (if needed) and show the vault environment")

    p = sub.add_parser("set", help="Set the given key and value")
    p.add_argument("key")
    p.add_argument("value", help="Value to store, or a file path for image/video/file types")
    p.add_argument("-n", "--no-password", action="store_true", help="Store without encryption")
    p.add_argument("-t", "--type", default="data/str", help="Category tag <kind>/<encoding> (default: data/str)")
    p.add_argument("-d", "--db", help="Database to use instead of the selected one")

    p = sub.add_parser("get", help="Get the value of a given key")
    p.add_argument("key")
    p.add_argument("-o", "--out", help="Where to write file items")
    p.add_argument("-d", "--db", help="Database to use instead of the selected one")

    p = sub.add_parser("rem", help="Remove a key from the database")
    p.add_argument("key")
    p.add_argument("-d", "--db", help="Database to use instead of the selected one")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    p = sub.add_parser("set-db", help="Set the default database")
    p.add_argument("name")

    p = sub.add_parser("ls", help="List all keys available from the database")
    p.add_argument("-d", "--db", help="Database to use instead of the selected one")

    p = sub.add_parser("create", help="Create a new empty database")
    p.add_argument("name")

    p = sub.add_parser("delete", help="Delete the given database name")
    p.add_argument("name")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    p = sub.add_parser("clear", help="Clear the given environment (db or files)")
    p.add_argument("name", choices=["db", "files"])
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    return parser


# ── Commands ─────────────────────────────────────────────────────────


def ask_new_password() -> str:
    """Prompt for a password to seal with, confirming non-empty ones."""
    password = console.prompt_password(SET_PASSWORD_PROMPT)
    if password:
        if console.prompt_password(CONFIRM_PASSWORD_PROMPT) != password:
            raise PasswordMismatch("Password does not match.")
    return password


def make_engine(env: VaultEnvironment) -> VaultItemEngine:
    def on_retry(attempt: int, max_attempts: int) -> None:
        console.warn("Password is invalid. Please try again")

    return VaultItemEngine(
        env.settings(),
        password_source=lambda label: console.prompt_password(label),
        on_retry=on_retry,
    )


def cmd_set(env: VaultEnvironment, args) -> int:
    db = env.open_db(args.db)
    password = "" if args.no_password else ask_new_password()
    typed = make_engine(env).upsert(db, args.key, password, args.value, args.type)
    console.say(
        f"Key: {console.paint(args.key, console.KEY)} stored in "
        f"{console.paint(db.name, console.GOOD)} ({typed.label})"
    )
    return 0


def cmd_get(env: VaultEnvironment, args) -> int:
    db = env.open_db(args.db)
    data = make_engine(env).retrieve(db, args.key, out=args.out, missing_ok=False)
    console.say(data, console.VALUE)
    return 0


def cmd_rem(env: VaultEnvironment, args) -> int:
    db = env.open_db(args.db)
    prompt = f"Are you sure you want to remove: {args.key}? (action can't be undone)"
    if not (args.yes or console.confirm(prompt)):
        console.say("Ignoring the key removal request.", console.BAD)
        return 0
    make_engine(env).remove(db, args.key)
    console.say(
        f"Key: {console.paint(args.key, console.BAD)} from Database: "
        f"{console.paint(db.name, console.BAD)} is successfully removed."
    )
    return 0


def cmd_set_db(env: VaultEnvironment, args) -> int:
    env.set_default_db(args.name)
    console.say(f"Successfully set the database to: {console.paint(args.name, console.GOOD)}")
    return 0


def cmd_ls(env: VaultEnvironment, args) -> int:
    db = env.open_db(args.db)
    for key, label in make_engine(env).describe(db):
        console.say(f"{console.paint(key, console.KEY)} ({console.paint(label, console.GOOD)})")
    return 0


def cmd_ls_db(env: VaultEnvironment, args) -> int:
    current = env.current_db_name()
    for name in env.list_databases():
        marker = "*" if name == current else " "
        console.say(f"{marker} {name}")
    return 0


def cmd_ls_file(env: VaultEnvironment, args) -> int:
    for name in env.list_files():
        console.say(name)
    return 0


def cmd_load_env(env: VaultEnvironment, args) -> int:
    settings = env.settings()
    console.say(f"home:     {settings.home}")
    console.say(f"db:       {settings.db_dir}")
    console.say(f"files:    {settings.files_dir}")
    console.say(f"selected: {console.paint(env.current_db_name(), console.GOOD)}")
    return 0


def cmd_create(env: VaultEnvironment, args) -> int:
    env.create_db(args.name)
    console.say(f"Database: {console.paint(args.name, console.GOOD)} is created.")
    return 0


def cmd_delete(env: VaultEnvironment, args) -> int:
    if not env.db_exists(args.name):
        raise MissingDatabase(f"Database {args.name} doesn't exist at all")
    prompt = f"Are you sure you want to delete: {args.name}? (action can't be undone)"
    if not (args.yes or console.confirm(prompt)):
        console.say("Ignoring the deletion request.", console.BAD)
        return 0
    env.delete_db(args.name)
    console.say(f"Database: {console.paint(args.name, console.BAD)} is removed.")
    return 0


def cmd_clear(env: VaultEnvironment, args) -> int:
    prompt = f"Are you sure you want to clear: {args.name}? (action can't be undone)"
    if not (args.yes or console.confirm(prompt)):
        console.say("Ignoring the clear request.", console.BAD)
        return 0
    env.clear(args.name)
    console.say(f"Environment: {console.paint(args.name, console.BAD)} is cleared.")
    return 0


def cmd_about(env: VaultEnvironment, args) -> int:
    console.say("\n" + BANNER, console.KEY)
    console.say(f"{console.paint('Yor v', console.GOOD)}{console.paint(__version__, console.VALUE)}")
    console.say("─" * 16, console.MUTED)
    console.say(
        "Yet another secure personal key-value storage vault\n"
        "for folks who store sensitive information.\n",
        console.MUTED,
    )
    return 0


COMMANDS = {
    "about": cmd_about,
    "ls-db": cmd_ls_db,
    "ls-file": cmd_ls_file,
    "load-env": cmd_load_env,
    "set": cmd_set,
    "get": cmd_get,
    "rem": cmd_rem,
    "set-db": cmd_set_db,
    "ls": cmd_ls,
    "create": cmd_create,
    "delete": cmd_delete,
    "clear": cmd_clear,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the yor command.

    Returns:
        Process exit status (0 on success, 1 on any fatal error)
    """
    args = build_parser().parse_args(argv)

    config = VaultConfig.from_env()
    configure_audit_logger(config.logs_dir)
    get_audit_logger().log_event(
        event_type=EventType.SYSTEM_START,
        severity=EventSeverity.INFO,
        message="Yor command started",
        details={"version": __version__, "command": args.command}
    )

    try:
        env = VaultEnvironment(config)
        env.initialize()
        return COMMANDS[args.command](env, args)
    except (VaultException, FileNotFoundError) as e:
        console.warn(str(e))
        get_audit_logger().log_event(
            event_type=EventType.VAULT_ERROR,
            severity=EventSeverity.CRITICAL,
            message=f"Command {args.command} failed: {type(e).__name__}",
            details={"command": args.command, "error": type(e).__name__}
        )
        return 1
    except KeyboardInterrupt:
        console.warn("\nAborted.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
