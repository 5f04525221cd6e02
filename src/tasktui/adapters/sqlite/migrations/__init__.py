"""Database migrations for the local task database."""

from .m001_initial_schema import initial_migration
from .runner import Migration, MigrationRunner

# All migrations in order
MIGRATIONS: list[Migration] = [
    initial_migration,
]

__all__ = ["MIGRATIONS", "Migration", "MigrationRunner", "initial_migration"]
