#!/usr/bin/env python
"""
Obrador - Database Management CLI

Usage:
    python -m scripts.db_manage check       # Test database connection
    python -m scripts.db_manage init        # Create tables directly (dev only)
    python -m scripts.db_manage migrate     # Run pending migrations
    python -m scripts.db_manage current     # Show current migration version
    python -m scripts.db_manage history     # Show migration history
    python -m scripts.db_manage reset       # Drop all and recreate (dev only)
    python -m scripts.db_manage seed        # Create the default roles
    python -m scripts.db_manage adduser     # Create a user with roles
"""

import sys

from sqlalchemy import select

from obrador.config import get_settings
from obrador.database import check_connection, drop_db, get_db_context, init_db
from obrador.models import Role, User


settings = get_settings()

DEFAULT_ROLES = {
    "admin": {
        "description": "Todos los permisos",
        "permissions": {
            "users": {"manage": True},
            "roles": {"manage": True},
            "timesheets": {"submit": True, "read": True, "manage": True, "viewAll": True},
        },
    },
    "supervisor": {
        "description": "Carga, consulta y corrige horas de todos",
        "permissions": {
            "timesheets": {"submit": True, "read": True, "manage": True, "viewAll": True},
        },
    },
    "operario": {
        "description": "Carga sus propias horas",
        "permissions": {
            "timesheets": {"submit": True},
        },
    },
}


def cmd_check():
    """Test database connection."""
    print(f"Connecting to: {settings.database_url.split('?')[0]}")
    try:
        check_connection()
        print("Connection successful!")
        return True
    except Exception as e:
        print(f"Connection failed: {e}")
        return False


def cmd_init():
    """Create all tables without migrations."""
    if not settings.debug:
        print("ERROR: init is only available in debug mode, use migrate")
        return False
    init_db()
    print("Tables created")
    return True


def cmd_migrate():
    """Run pending Alembic migrations."""
    from alembic.config import Config
    from alembic import command
    
    print("Running migrations...")
    alembic_cfg = Config("alembic.ini")
    command.upgrade(alembic_cfg, "head")
    print("Migrations complete!")
    return True


def cmd_current():
    """Show current migration version."""
    from alembic.config import Config
    from alembic import command
    
    alembic_cfg = Config("alembic.ini")
    command.current(alembic_cfg)
    return True


def cmd_history():
    """Show migration history."""
    from alembic.config import Config
    from alembic import command
    
    alembic_cfg = Config("alembic.ini")
    command.history(alembic_cfg)
    return True


def cmd_reset():
    """Drop all tables and recreate them."""
    if not settings.debug:
        print("ERROR: reset is only available in debug mode")
        return False
    
    confirm = input("This will DELETE ALL DATA. Type 'yes' to confirm: ")
    if confirm.lower() != "yes":
        print("Aborted")
        return False
    
    drop_db()
    init_db()
    print("Reset complete!")
    return True


def cmd_seed():
    """Create or refresh the default roles."""
    with get_db_context() as db:
        for name, definition in DEFAULT_ROLES.items():
            role = db.get(Role, name)
            if role is None:
                role = Role(name=name)
                db.add(role)
                print(f"Role '{name}' created")
            else:
                print(f"Role '{name}' updated")
            role.description = definition["description"]
            role.permissions = definition["permissions"]
        db.commit()
    return True


def cmd_adduser():
    """Create a user with one or more roles."""
    username = input("Username: ").strip().lower()
    if not username:
        print("Username required")
        return False
    
    display_name = input("Display name: ").strip() or None
    roles = [r.strip() for r in input("Roles (comma separated): ").split(",") if r.strip()]
    
    with get_db_context() as db:
        existing = db.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()
        if existing:
            print(f"User '{username}' already exists")
            return False
        
        known = set(db.execute(select(Role.name)).scalars().all())
        unknown = [r for r in roles if r not in known]
        if unknown:
            print(f"Unknown roles: {', '.join(unknown)} (run 'seed' first?)")
            return False
        
        user = User(username=username, display_name=display_name, roles=roles)
        db.add(user)
        db.commit()
        print(f"User {user.label} created with id {user.user_id}")
    
    return True


def cmd_help():
    """Show help."""
    print(__doc__)
    return True


COMMANDS = {
    "check": cmd_check,
    "init": cmd_init,
    "migrate": cmd_migrate,
    "current": cmd_current,
    "history": cmd_history,
    "reset": cmd_reset,
    "seed": cmd_seed,
    "adduser": cmd_adduser,
    "help": cmd_help,
}


def main():
    if len(sys.argv) < 2:
        cmd_help()
        sys.exit(1)
    
    command = sys.argv[1].lower()
    
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        cmd_help()
        sys.exit(1)
    
    success = COMMANDS[command]()
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
