"""Marketplace management CLI.

Usage:
    python src/manage.py setup-db            # Create all tables
    python src/manage.py drop-db             # Drop all tables
    python src/manage.py seed                # Default permissions and system roles
    python src/manage.py seed --admin-email admin@example.com --admin-password ...
"""

import argparse
import sys

DOMAIN_NAMES = ["identity", "ordering"]


def _domains(names=None):
    from identity.domain import identity
    from ordering.domain import ordering

    all_domains = {"identity": identity, "ordering": ordering}
    return {name: all_domains[name] for name in (names or DOMAIN_NAMES)}


def setup_databases(names=None):
    from shared.db import setup_db

    for name, domain in _domains(names).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(names=None):
    from shared.db import drop_db

    for name, domain in _domains(names).items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def seed(admin_email=None, admin_password=None, admin_username="admin"):
    """Seed permissions and system roles, optionally creating an admin account."""
    from identity.access.seed import seed_access_control
    from identity.domain import identity
    from identity.user.registration import RegisterUser
    from identity.user.role_assignment import AssignUserRoles
    from identity.user.user import User

    identity.init()
    with identity.domain_context():
        created = seed_access_control()
        print(f"Permissions created: {', '.join(created['permissions']) or 'none'}")
        print(f"Roles created: {', '.join(created['roles']) or 'none'}")

        if admin_email and admin_password:
            if identity.repository_for(User).find_by_email(admin_email) is not None:
                print(f"Admin account already exists: {admin_email}")
                print("Done.")
                return

            user_id = identity.process(
                RegisterUser(username=admin_username, email=admin_email, password=admin_password),
                asynchronous=False,
            )
            identity.process(AssignUserRoles(user_id=user_id, roles=["admin"]), asynchronous=False)
            print(f"Admin account created: {admin_email}")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Marketplace management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (("setup-db", "Create all database tables"), ("drop-db", "Drop all database tables")):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--domain",
            choices=DOMAIN_NAMES,
            nargs="*",
            help="Specific domain(s) to target (default: all)",
        )

    seed_parser = subparsers.add_parser("seed", help="Create default permissions and system roles")
    seed_parser.add_argument("--admin-email", help="Also register an admin account with this email")
    seed_parser.add_argument("--admin-password", help="Password for the admin account")
    seed_parser.add_argument("--admin-username", default="admin")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "seed":
        seed(args.admin_email, args.admin_password, args.admin_username)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
