# dim_scorekeeper/agents/__init__.py
from .base import DimAgent
from .random_agent import RandomDimAgent

__all__ = [
    "DimAgent",
    "RandomDimAgent",
]
