#!/usr/bin/env python3
"""
Database management script for the invoicing service.
Handles table creation, migrations and the overdue sweep for an external cron.
"""

import sys
import asyncio
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from alembic.config import Config
from alembic import command
from app.infrastructure.db.database import init_db, drop_db
from app.infrastructure.scheduling.overdue_sweeper import create_overdue_sweeper


ALEMBIC_INI = Path(__file__).parent / "app/infrastructure/db/migrations/alembic.ini"


def alembic_config() -> Config:
    config = Config(str(ALEMBIC_INI))
    config.set_main_option("script_location", str(ALEMBIC_INI.parent))
    return config


def create_tables():
    """Create missing tables without going through migrations."""
    print("Creating tables...")
    init_db()


def drop_tables():
    """Drop all tables - WARNING: This will drop all data!"""
    response = input("This will drop ALL data. Type 'yes' to continue: ")
    if response.lower() == 'yes':
        print("Dropping tables...")
        drop_db()
    else:
        print("Drop cancelled.")


def sweep_overdue():
    """Mark pending invoices past their due date as overdue."""
    changed = asyncio.run(create_overdue_sweeper().run_once())
    print(f"Marked {changed} invoice(s) overdue")


def create_migration(message: str = "Auto-generated migration"):
    """Create a new migration."""
    print(f"Creating migration: {message}")
    command.revision(alembic_config(), message=message, autogenerate=True)


def run_migrations():
    """Run pending migrations."""
    print("Running migrations...")
    command.upgrade(alembic_config(), "head")


def rollback_migration():
    """Rollback last migration."""
    print("Rolling back migration...")
    command.downgrade(alembic_config(), "-1")


def show_current_revision():
    """Show current database revision."""
    command.current(alembic_config())


def show_history():
    """Show migration history."""
    command.history(alembic_config())


def main():
    """Main CLI function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [command]")
        print("Commands:")
        print("  create         - Create tables")
        print("  drop           - Drop tables (WARNING: drops all data)")
        print("  sweep-overdue  - Mark past-due pending invoices overdue")
        print("  revision [msg] - Create new migration")
        print("  migrate        - Run pending migrations")
        print("  rollback       - Rollback last migration")
        print("  current        - Show current revision")
        print("  history        - Show migration history")
        return

    command_name = sys.argv[1]

    if command_name == "create":
        create_tables()
    elif command_name == "drop":
        drop_tables()
    elif command_name == "sweep-overdue":
        sweep_overdue()
    elif command_name == "revision":
        message = " ".join(sys.argv[2:]) if len(sys.argv) > 2 else "Auto-generated migration"
        create_migration(message)
    elif command_name == "migrate":
        run_migrations()
    elif command_name == "rollback":
        rollback_migration()
    elif command_name == "current":
        show_current_revision()
    elif command_name == "history":
        show_history()
    else:
        print(f"Unknown command: {command_name}")


if __name__ == "__main__":
    main()
