"""Parsing of fetched inputs into the forms the extractors consume."""

from .blog_index import parse_blog_links, parse_feed_index, render_feed_index

__all__ = ["parse_blog_links", "parse_feed_index", "render_feed_index"]
