"""Track entity and lifecycle service."""

from .models import Track
from .service import TrackService

__all__ = ["Track", "TrackService"]
