"""Environment profiles that map --env names to databases."""

from .loader import EnvironmentLoadError, EnvironmentLoader, resolve_database_path
from .models import EnvironmentProfile

__all__ = [
    "EnvironmentLoadError",
    "EnvironmentLoader",
    "EnvironmentProfile",
    "resolve_database_path",
]
