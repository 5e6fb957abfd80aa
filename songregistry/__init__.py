"""Song ownership registry backed by Flask and SQLAlchemy."""
