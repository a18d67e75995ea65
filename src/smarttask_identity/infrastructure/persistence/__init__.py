"""Persistence implementations for smarttask_identity.

This package contains database-specific implementations of the
repository interfaces defined in smarttask_identity.domain.

Structure:
    persistence/
    └── sqlalchemy/     # SQLAlchemy/SQL database implementation
"""
