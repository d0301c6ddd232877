"""FastAPI routers acting as controllers in the MVC architecture."""

from . import personas, transform

__all__ = ["personas", "transform"]
