"""Minimal HTML pages for non-immediate redirects and crawler previews."""

import math
from html import escape


def _page(title: str, body: str, head_extra: str = "") -> str:
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n'
        '<meta charset="utf-8"/>\n'
        '<meta name="viewport" content="width=device-width,initial-scale=1"/>\n'
        f"<title>{escape(title)}</title>\n"
        f"{head_extra}"
        "</head>\n<body>\n"
        f"{body}\n"
        "</body>\n</html>\n"
    )


def delayed_redirect_page(url: str, delay_ms: int, message: str) -> str:
    """
    Page that follows the URL after a delay.

    Args:
        url: Destination URL
        delay_ms: Delay in milliseconds
        message: Heading shown while waiting

    Returns:
        HTML document
    """
    seconds = math.ceil(delay_ms / 1000)
    safe_url = escape(url, quote=True)
    return _page(
        "Redirecting...",
        f"<h1>{escape(message)}</h1>\n"
        f"<p>You will be redirected automatically in {seconds} seconds.</p>\n"
        f'<p>If you are not redirected automatically, <a href="{safe_url}">click here</a>.</p>',
        head_extra=f'<meta http-equiv="refresh" content="{seconds};url={safe_url}"/>\n',
    )


def custom_redirect_page(url: str, message: str) -> str:
    """Page with a message and a link the visitor follows manually."""
    return _page(
        "Visit Our Website",
        f"<h1>{escape(message)}</h1>\n"
        f'<a href="{escape(url, quote=True)}">Visit Website</a>',
    )


def bot_preview_page(title: str, description: str) -> str:
    """Open Graph preview for link-preview crawlers."""
    head = (
        f'<meta property="og:title" content="{escape(title, quote=True)}"/>\n'
        f'<meta property="og:description" content="{escape(description, quote=True)}"/>\n'
        '<meta property="og:type" content="website"/>\n'
    )
    return _page(title, f"<h1>{escape(title)}</h1>\n<p>{escape(description)}</p>", head_extra=head)
