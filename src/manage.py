"""PartStore management CLI.

Usage:
    python src/manage.py setup-db                 # Create all tables
    python src/manage.py drop-db                  # Drop all tables
    python src/manage.py create-admin --email admin@example.com --password secret123
    python src/manage.py purge-notifications      # Delete expired read notifications
"""

import argparse
import sys


def _domain():
    from partstore.domain import partstore

    partstore.init()
    return partstore


def setup_database():
    from partstore.utils.db import setup_db

    print("Creating partstore database schema...")
    setup_db(_domain())
    print("Done.")


def drop_database():
    from partstore.utils.db import drop_db

    print("Dropping partstore database schema...")
    drop_db(_domain())
    print("Done.")


def create_admin(name, email, password, role):
    """Bootstrap an admin account; an existing email is left untouched."""
    from partstore.identity.admin import Admin
    from partstore.identity.admins import RegisterAdmin
    from partstore.shared.queries import fetch_one

    domain = _domain()
    with domain.domain_context():
        if fetch_one(Admin, email=email.strip().lower()) is not None:
            print(f"Admin {email} already exists.")
            return
        admin_id = domain.process(
            RegisterAdmin(name=name, email=email, password=password, role=role),
            asynchronous=False,
        )
    print(f"Created {role} {email} ({admin_id}).")


def purge_notifications():
    from partstore.notifications.inbox import PurgeExpiredNotifications

    domain = _domain()
    with domain.domain_context():
        purged = domain.process(PurgeExpiredNotifications(), asynchronous=False)
    print(f"Purged {purged} expired notifications.")


def main():
    parser = argparse.ArgumentParser(description="PartStore management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("--name", default="Super Admin")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--role", choices=["admin", "superadmin"], default="superadmin")

    subparsers.add_parser("purge-notifications", help="Delete read notifications past their retention")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        create_admin(args.name, args.email, args.password, args.role)
    elif args.command == "purge-notifications":
        purge_notifications()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
