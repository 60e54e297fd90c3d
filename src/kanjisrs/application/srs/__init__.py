# Application SRS Package
from .engine import SrsEngine

__all__ = ["SrsEngine"]
