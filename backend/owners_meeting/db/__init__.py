"""Database engine, session, and metadata helpers."""
