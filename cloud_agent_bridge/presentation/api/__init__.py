"""
API Routers - FastAPI endpoint definitions.
"""

from cloud_agent_bridge.presentation.api.metrics import router as metrics_router

__all__ = [
    "metrics_router",
]
