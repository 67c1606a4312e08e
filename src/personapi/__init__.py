"""Core package for the personapi service.

The top-level module exposes the service version and the
:func:`get_session` helper for working with the persistence layer.
"""

from .db import get_session

__version__ = "0.1.0"

__all__ = ["get_session", "__version__"]
