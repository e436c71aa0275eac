"""
# Configuration Management Module

This module provides the configuration system for the Blog Registry service.
Built on **Pydantic Settings**, it loads values from the environment or a config file,
validates them at startup, and exposes a single `settings` instance.

## Configuration Loading Hierarchy

Higher layers override lower layers:

1. **Environment Variables** (highest priority)
2. **`BLOG_REGISTRY_CONFIG_PATH`**: custom config file path
3. **`.env` File** in the project root
4. **Default Values** (lowest priority)

If no configuration file is found, the service runs in environment-only mode.

## Configuration Groups

### Server
```python
HOST: str = "127.0.0.1"
PORT: int = 8000
DEBUG: bool = True
LOG_LEVEL: str = "INFO"
```

### Registry
```python
REGISTRY_ACCOUNT_ID: str = "blog-registry"  # The deploying account; always allowed to manage moderators
REQUIRED_DEPOSIT: int = 1  # Exact deposit (minimal currency units) for payable operations
DEFAULT_PAGE_LIMIT: int = 20
INITIAL_DENYLIST: List[str] = []  # Seeded into the denylist at initialization
```

### Storage
```python
STORAGE_BACKEND: str = "memory"  # "memory" | "mongodb"
MONGODB_URL: str = ""  # Required when STORAGE_BACKEND == "mongodb"
MONGODB_DATABASE: str = "blog_registry"
```

## Usage

```python
from blog_registry.config import settings

if settings.uses_mongodb:
    await db_manager.connect()
```

The module does no logging of its own so it can be imported before the logging manager.
"""

import os
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Constants ---
DEFAULT_ENV_FILENAME: str = ".env"
CONFIG_ENV_VAR: str = "BLOG_REGISTRY_CONFIG_PATH"
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent
STORAGE_BACKENDS = ["memory", "mongodb"]


# --- Config file discovery (no logging) ---
def get_config_path() -> Optional[str]:
    """
    Determines the configuration file path based on a predefined precedence order.

    1.  **Environment Variable**: `BLOG_REGISTRY_CONFIG_PATH` (if set and file exists).
    2.  **Dotenv Config**: `.env` file in the project root directory.
    3.  **Fallback**: Returns `None`, triggering environment-variable-only mode.

    Returns:
        Optional[str]: The absolute path to the configuration file, or `None` if not found.
    """
    env_path: Optional[str] = os.environ.get(CONFIG_ENV_VAR)
    if env_path and os.path.exists(env_path):
        return env_path
    env_path_file: Path = PROJECT_ROOT / DEFAULT_ENV_FILENAME
    if env_path_file.exists():
        return str(env_path_file)
    return None


CONFIG_PATH: Optional[str] = get_config_path()
if CONFIG_PATH:
    load_dotenv(dotenv_path=CONFIG_PATH, override=True)


class Settings(BaseSettings):
    """
    Application configuration settings model.

    **Configuration Groups:**
    *   **Server**: Host, port, debug mode, log level.
    *   **Registry**: Deploying account, deposit amount, pagination defaults, initial denylist.
    *   **Storage**: Backend selection and MongoDB connection details.

    **Validation:**
    Storage backend must be a known value, MongoDB must be configured when selected,
    and numeric registry settings must be positive.
    """

    model_config = SettingsConfigDict(
        env_file=CONFIG_PATH if CONFIG_PATH else None,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Server configuration
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Registry configuration
    REGISTRY_ACCOUNT_ID: str = "blog-registry"
    REQUIRED_DEPOSIT: int = 1
    DEFAULT_PAGE_LIMIT: int = 20
    INITIAL_DENYLIST: List[str] = []

    # Storage configuration
    STORAGE_BACKEND: str = "memory"
    MONGODB_URL: str = ""
    MONGODB_DATABASE: str = "blog_registry"
    MONGODB_CONNECTION_TIMEOUT: int = 10000
    MONGODB_SERVER_SELECTION_TIMEOUT: int = 5000
    MONGODB_USERNAME: Optional[str] = None
    MONGODB_PASSWORD: Optional[SecretStr] = None

    @field_validator("STORAGE_BACKEND", mode="before")
    @classmethod
    def validate_storage_backend(cls, v: Any, info: Any) -> str:
        """
        Normalizes the backend name and rejects unknown backends.

        Raises:
            ValueError: If the backend is not one of `STORAGE_BACKENDS`.
        """
        value = str(v).strip().lower()
        if value not in STORAGE_BACKENDS:
            raise ValueError(f"{info.field_name} must be one of {STORAGE_BACKENDS}, got {v!r}")
        return value

    @field_validator("REQUIRED_DEPOSIT", "DEFAULT_PAGE_LIMIT", mode="before")
    @classmethod
    def validate_positive_integers(cls, v: Any, info: Any) -> int:
        try:
            value = int(v)
        except (TypeError, ValueError):
            raise ValueError(f"{info.field_name} must be an integer")
        if value <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return value

    @model_validator(mode="after")
    def mongodb_url_required(self) -> "Settings":
        if self.STORAGE_BACKEND == "mongodb" and not self.MONGODB_URL.strip():
            raise ValueError("MONGODB_URL must be set via environment or .env when STORAGE_BACKEND is 'mongodb'")
        return self

    @property
    def uses_mongodb(self) -> bool:
        """Whether registry state is persisted in MongoDB."""
        return self.STORAGE_BACKEND == "mongodb"


# Global settings instance
settings: Settings = Settings()
