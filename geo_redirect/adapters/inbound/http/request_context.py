"""Request context helpers for redirect routes."""

import re

from fastapi import Request

IPV4_MAPPED_PREFIX = "::ffff:"

# Link-preview crawlers get a preview page instead of a redirect
BOT_USER_AGENT_PATTERN = re.compile(
    r"(facebookexternalhit|whatsapp|twitterbot|linkedinbot|slackbot|telegrambot|discordbot"
    r"|googlebot|bingbot|yandexbot|baiduspider|duckduckbot|applebot|semrushbot|ahrefsbot"
    r"|mj12bot|dotbot|petalbot)",
    re.IGNORECASE,
)


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address.

    Order: first X-Forwarded-For entry, X-Real-IP, connection address with
    the IPv4-mapped IPv6 prefix stripped.

    Args:
        request: FastAPI request object

    Returns:
        Client address, or empty string if unknown
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    host = request.client.host if request.client else ""
    if host and host.startswith(IPV4_MAPPED_PREFIX):
        host = host[len(IPV4_MAPPED_PREFIX) :]
    return host or ""


def is_bot(user_agent: str) -> bool:
    """Check if a user agent belongs to a link-preview crawler."""
    return bool(user_agent) and BOT_USER_AGENT_PATTERN.search(user_agent) is not None
