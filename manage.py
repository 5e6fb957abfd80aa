# manage.py
import sys

from app import create_app
from songregistry.database.db_manager import db
from songregistry.domain.registry import IdentifierAllocator, LedgerClock


def create_db():
    """Creates the database tables and seeds the registry counters."""
    app = create_app()
    with app.app_context():
        print(f"Database: {app.config['SQLALCHEMY_DATABASE_URI']}")
        db.create_all()
        print("Database tables created!")


def show_state():
    """Print the song counter and the ledger height."""
    app = create_app()
    with app.app_context():
        print(f"total_count={IdentifierAllocator(db.session).current()}")
        print(f"ledger_height={LedgerClock(db.session).current()}")


COMMANDS = {
    'create_db': create_db,
    'show_state': show_state,
}


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("No command provided. Usage: python manage.py [create_db|show_state]")
        return 1
    command = COMMANDS.get(argv[0])
    if command is None:
        print(f"Unknown command: {argv[0]}")
        print("Usage: python manage.py [create_db|show_state]")
        return 1
    command()
    return 0


if __name__ == '__main__':
    sys.exit(main())
