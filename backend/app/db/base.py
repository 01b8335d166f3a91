from app.models import Base

__all__ = ["Base"]
