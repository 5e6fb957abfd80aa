# database/db_manager.py
from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash
import os  # Import os for path handling
import logging
from datetime import datetime
from sqlalchemy import ForeignKey, CheckConstraint
from sqlalchemy.engine import make_url
from sqlalchemy.orm import relationship

# Initialize the SQLAlchemy object
db = SQLAlchemy()
logger = logging.getLogger(__name__)

TOTAL_COUNT_KEY = "total_count"
LEDGER_HEIGHT_KEY = "ledger_height"


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    # Opaque identity handed to the registry; compared exactly, never normalized
    principal = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    last_login_at = db.Column(db.DateTime, nullable=True)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def get_id(self) -> str:
        return str(self.id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "principal": self.principal,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
        }

    def __repr__(self) -> str:
        return f"<User {self.principal}>"


# --- Registry tables ---
class Song(db.Model):
    __tablename__ = 'songs'

    # Assigned by the identifier allocator, never by the database
    id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    title = db.Column(db.String(64), nullable=False)
    artist = db.Column(db.String(32), nullable=False)
    owner = db.Column(db.String(255), nullable=False, index=True)
    duration = db.Column(db.Integer, nullable=False)
    creation_height = db.Column(db.Integer, nullable=False)
    genre = db.Column(db.String(32), nullable=False)
    tags = db.Column(db.JSON, nullable=False)  # list[str]

    permissions = relationship('SongPermission', back_populates='song', lazy=True)

    __table_args__ = (
        CheckConstraint('id > 0', name='ck_songs_positive_id'),
        CheckConstraint('duration > 0 AND duration < 10000', name='ck_songs_duration_range'),
    )

    def __repr__(self):
        return f'<Song {self.id}: {self.title} by {self.artist}>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'artist': self.artist,
            'owner': self.owner,
            'duration': self.duration,
            'creation_height': self.creation_height,
            'genre': self.genre,
            'tags': list(self.tags or []),
        }


class SongPermission(db.Model):
    __tablename__ = 'song_permissions'

    song_id = db.Column(
        db.Integer,
        ForeignKey('songs.id', ondelete='RESTRICT'),
        primary_key=True,
    )
    user = db.Column(db.String(255), primary_key=True)
    authorized = db.Column(db.Boolean, nullable=False)

    song = relationship('Song', back_populates='permissions')

    def to_dict(self) -> dict:
        return {
            'song_id': self.song_id,
            'user': self.user,
            'authorized': self.authorized,
        }


class RegistryState(db.Model):
    """Named integer cells: the song counter and the ledger height."""

    __tablename__ = 'registry_state'

    name = db.Column(db.String(32), primary_key=True)
    value = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint('value >= 0', name='ck_registry_state_non_negative'),
    )

    def to_dict(self) -> dict:
        return {'name': self.name, 'value': self.value}


def ensure_registry_state(genesis_height: int = 0) -> None:
    """Seed the counter and ledger height rows if this is a fresh database."""
    from sqlalchemy.exc import IntegrityError

    seeds = {TOTAL_COUNT_KEY: 0, LEDGER_HEIGHT_KEY: max(0, int(genesis_height))}
    try:
        for name, value in seeds.items():
            if db.session.get(RegistryState, name) is None:
                db.session.add(RegistryState(name=name, value=value))
        db.session.commit()
    except IntegrityError:
        # Another process seeded the rows first
        db.session.rollback()


def initialize_database(app):
    """
    Initializes the SQLAlchemy extension with the Flask app instance
    and creates all database tables if they don't already exist.
    """
    db.init_app(app)
    # Ensure the instance folder exists for SQLite database file
    instance_path = app.instance_path
    if not os.path.exists(instance_path):
        os.makedirs(instance_path)
        logger.info("Created instance folder: %s", instance_path)

    # Ensure the directory for the configured SQLite file exists
    try:
        uri = app.config.get('SQLALCHEMY_DATABASE_URI')
        if uri:
            url = make_url(uri)
            # Only handle file-based SQLite (not :memory:)
            if url.get_backend_name() == 'sqlite' and url.database and url.database != ':memory:':
                db_dir = os.path.dirname(url.database)
                if db_dir and not os.path.exists(db_dir):
                    os.makedirs(db_dir, exist_ok=True)
                    logger.info("Created SQLite DB directory: %s", db_dir)
    except Exception as e:
        # Don't block app startup on path parsing issues; log and continue
        logger.warning("Could not ensure SQLite directory exists: %s", e)

    # Create database tables within the application context
    with app.app_context():
        db.create_all()
        logger.info("Database tables created or already exist.")
        ensure_registry_state(app.config.get('LEDGER_GENESIS_HEIGHT', 0))
