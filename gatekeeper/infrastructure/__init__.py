"""Infrastructure: persistence (SQLAlchemy), audit log writer, seeding."""
