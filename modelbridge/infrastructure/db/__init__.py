from .config import (DEFAULT_DB_TIMEOUT, get_db_options, get_default_timeout,
                     get_models_config, get_path_config, load_config)
from .connection import DatabaseError, apply_pragmas, open_connection

__all__ = [
    "DEFAULT_DB_TIMEOUT",
    "DatabaseError",
    "apply_pragmas",
    "get_db_options",
    "get_default_timeout",
    "get_models_config",
    "get_path_config",
    "load_config",
    "open_connection",
]
