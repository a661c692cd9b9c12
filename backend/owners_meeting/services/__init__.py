"""Service layer: all reads and writes against the database."""
