"""
# Database Package

The persistence layer of the blog registry.

- **`state_store`**: `RegistryState` and its in-memory and MongoDB collections.
- **`manager`**: the `DatabaseManager` singleton owning the Motor client.

The `db_manager` instance is created at import time; the MongoDB connection is
only opened by `db_manager.connect()` during application startup, and only when
the MongoDB backend is configured.

```python
from blog_registry.database import db_manager, RegistryState

await db_manager.connect()
state = RegistryState.from_database(db_manager)
```

Attributes:
    db_manager (DatabaseManager): The global instance for database access.
"""

from blog_registry.database.manager import DatabaseManager
from blog_registry.database.state_store import RegistryState

db_manager = DatabaseManager()

__all__ = ["DatabaseManager", "RegistryState", "db_manager"]
