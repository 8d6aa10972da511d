"""Import all models so SQLAlchemy metadata knows about them."""
from app.models.base import Base
from app.models.pdf import Pdf

__all__ = ["Base", "Pdf"]
