"""Standardized API response helpers.

Ensures consistent response structure across endpoints that report
success explicitly: {"success": True, ...}
"""


def success_response(data: dict, **extras) -> dict:
    """Standard success response wrapper.

    Usage:
        return success_response({"data": {"departments": departments}})

    Returns:
        {"success": True, **data, **extras}
    """
    return {"success": True, **data, **extras}
