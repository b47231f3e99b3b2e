import time

from dooray_mcp.api import projects as projects_api
from dooray_mcp.client import DoorayClient


async def system_ping(client: DoorayClient) -> dict:
    """
    Connectivity and latency check against the Dooray API.
    Returns status plus the authenticated member's name and id.
    """
    start = time.perf_counter()

    member = await projects_api.get_my_member(client)

    latency_ms = (time.perf_counter() - start) * 1000

    member = member or {}
    return {
        "status": "ok",
        "latency_ms": round(latency_ms, 2),
        "member_name": member.get("name", "Unknown"),
        "member_id": member.get("id"),
        "instance_url": client.base_url,
    }
