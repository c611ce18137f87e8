"""
Model package.

IMPORTANT (Alembic / SQLModel):
- Alembic autogenerate relies on `SQLModel.metadata`, which is populated only
  when the table models are imported.
- `alembic/env.py` and `atlas_auth.db.engine` import `atlas_auth.models`, so
  this module must import all SQLModel `table=True` models to register them.
"""

# Import table models so SQLModel registers them in metadata.
from atlas_auth.user.models import User  # noqa: F401
