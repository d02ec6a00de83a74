"""
Command-line interface for Greenlight.

Provides commands for:
- setup: Check and create required tables
- status: Show current database status
- ping: Check that the database is reachable
"""

import argparse
from typing import Optional

from .config import Config
from .database import DatabaseManager
from .utils import format_number, print_header, print_status_table


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all commands."""
    parser = argparse.ArgumentParser(
        prog="greenlight",
        description="Greenlight - manage the movie database behind the API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Setup (run first)
  python -m greenlight setup

  # Check status
  python -m greenlight status

  # Serve the API
  uvicorn api.main:app --port 4000
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("setup", help="Check for missing tables and create them")
    subparsers.add_parser("status", help="Show current database status")
    subparsers.add_parser("ping", help="Check that the database is reachable")

    parser.add_argument(
        "--env-file",
        help="Path to a .env file (default: ./.env)",
    )

    return parser


def cmd_setup(db: DatabaseManager) -> int:
    """Run setup command."""
    print_header("Greenlight Setup")

    result = db.check_and_create_tables()

    print("\nTables:")
    for table in DatabaseManager.REQUIRED_TABLES:
        if table in result["existing"]:
            print(f"  {table:<20} EXISTS")
        elif table in result["created"]:
            print(f"  {table:<20} CREATED")
        else:
            print(f"  {table:<20} MISSING")

    print(
        f"\nSetup complete! {len(result['created'])} tables created, "
        f"{len(result['existing'])} already existed."
    )

    if result["all_present"]:
        print("All required tables are now present.")
        return 0
    print("WARNING: Some tables are still missing!")
    return 1


def cmd_status(db: DatabaseManager) -> int:
    """Run status command."""
    print_header("Greenlight Status")

    status = db.get_status()

    print_status_table(
        {
            "Movies": format_number(status["movie_count"]),
            "All tables exist": "Yes" if status["all_tables_exist"] else "No",
        },
        title="Database Status",
    )

    if status["missing_tables"]:
        print(f"Missing tables: {', '.join(status['missing_tables'])}")
        print("\nRun 'python -m greenlight setup' to create missing tables.")

    return 0


def cmd_ping(db: DatabaseManager) -> int:
    """Run ping command."""
    if db.ping():
        print("database connection pool established")
        return 0
    print("database is unreachable")
    return 1


def main(args: Optional[list] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 0

    try:
        config = Config.from_env(parsed_args.env_file)
    except ValueError as e:
        print(f"Configuration error: {e}")
        print("\nMake sure your .env file contains:")
        print("  SQL_HOST, SQL_PORT, SQL_USER, SQL_PASS, SQL_DB")
        return 1

    db = DatabaseManager(config)

    commands = {
        "setup": cmd_setup,
        "status": cmd_status,
        "ping": cmd_ping,
    }
    return commands[parsed_args.command](db)
