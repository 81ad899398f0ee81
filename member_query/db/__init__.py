"""Database layer: ORM models, sessions and member repository."""
