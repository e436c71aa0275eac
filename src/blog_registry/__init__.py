"""
# Blog Registry

Persistent-state registry for a decentralized blogging platform: authors,
moderators, a denylist, and blog posts referencing externally stored content.

## Package Layout

- **`config`**: Pydantic settings.
- **`models`**: `BlogPost`, `CallContext` and request models.
- **`managers`**: logging, permission guards and the registry operations.
- **`database`**: registry state store (in-memory or MongoDB).
- **`routes`**: FastAPI remote-procedure surface.
- **`cli`**: denylist administration.
"""

__version__ = "1.0.0"
