"""API routes package initialization."""
from app.api.routes import engine, news, transactions, health

__all__ = ["engine", "news", "transactions", "health"]
