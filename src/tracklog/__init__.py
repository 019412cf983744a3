"""tracklog: personal time tracking with durable track history."""

__version__ = "0.1.0"

__all__ = ["__version__"]
