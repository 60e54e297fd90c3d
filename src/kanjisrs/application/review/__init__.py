# Application Review Package
from .session import ReviewItemState, ReviewSession, ReviewSettings

__all__ = ["ReviewItemState", "ReviewSession", "ReviewSettings"]
