"""
Prometheus scrape endpoint for the bridge's counters and latency histogram.

Check locally with: curl http://localhost:5001/metrics
"""

from fastapi import APIRouter, Response

from cloud_agent_bridge.observability.metrics import get_metrics_content

router = APIRouter(prefix="/metrics", tags=["observability"])


@router.get("")
async def metrics() -> Response:
    """Current metric values in the Prometheus text exposition format."""
    body, media_type = get_metrics_content()
    return Response(content=body, media_type=media_type)
