"""
Blog index handling.

The blog page is reduced to the ordered list of post links, newest first,
and persisted as one link per line so the next run can tell which posts
are new.
"""

from __future__ import annotations

from bs4 import BeautifulSoup


def parse_blog_links(html: str, selector: str = ".header-link") -> list[str]:
    """Extract post links from the blog index page.

    Args:
        html: The blog index HTML
        selector: CSS selector matching the post link elements

    Returns:
        The ``href`` of every matching element that has one, in document order

    Examples:
        >>> parse_blog_links('<a class="header-link" href="/blog/a">A</a>')
        ['/blog/a']
    """
    soup = BeautifulSoup(html, "html.parser")
    links: list[str] = []
    for element in soup.select(selector):
        href = element.get("href")
        if href:
            links.append(href.strip())
    return links


def parse_feed_index(text: str) -> list[str]:
    """Split a persisted feed index into entries, ignoring blank lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def render_feed_index(entries: list[str]) -> str:
    """Serialize entries as one per line, each followed by a newline."""
    return "".join(f"{entry}\n" for entry in entries)
