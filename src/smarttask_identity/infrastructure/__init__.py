"""Infrastructure adapters: SQLAlchemy stores and the logging audit sink."""
