"""Group verified records by category and link articles to their blogs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogsync.domain.model import ContentCategory, GroupedContent

if TYPE_CHECKING:
    from collections.abc import Iterable

    from catalogsync.domain.model import ContentRecord, Entry


class ResponseAssembler:
    """Build the ``{products, blogs, articles}`` listing.

    Entries are the record's stored output plus ``contentId`` and ``category``.
    Within each group the newest content (by latest of published, created and
    updated time) comes first. Articles gain a ``blog`` key holding a copy of
    the matching blog entry from the same listing, or ``None``.
    """

    def assemble(self, records: Iterable[ContentRecord]) -> GroupedContent:
        grouped = GroupedContent()
        ordered = sorted(records, key=lambda record: record.latest_timestamp, reverse=True)
        for record in ordered:
            entry = _entry(record)
            match record.category:
                case ContentCategory.PRODUCT:
                    grouped.products.append(entry)
                case ContentCategory.BLOG:
                    grouped.blogs.append(entry)
                case ContentCategory.ARTICLE:
                    grouped.articles.append(entry)

        blogs_by_id = {str(blog["contentId"]): blog for blog in grouped.blogs}
        grouped.articles = [_link_blog(article, blogs_by_id) for article in grouped.articles]
        return grouped


def _entry(record: ContentRecord) -> Entry:
    return {**record.output, "contentId": record.content_id, "category": str(record.category)}


def _link_blog(article: Entry, blogs_by_id: dict[str, Entry]) -> Entry:
    blog_id = article.get("blog_id")
    blog = blogs_by_id.get(str(blog_id)) if blog_id is not None else None
    return {**article, "blog": dict(blog) if blog is not None else None}
