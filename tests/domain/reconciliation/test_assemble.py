from __future__ import annotations

from uuid import uuid4

from catalogsync.domain.model import ContentCategory
from catalogsync.domain.reconciliation import ResponseAssembler
from tests.helpers.catalog import make_record


def test_articles_link_to_blog_by_string_id() -> None:
    shop_id = uuid4()
    blog = make_record(shop_id, 42, ContentCategory.BLOG, output={"title": "News"})
    linked = make_record(
        shop_id, 1, ContentCategory.ARTICLE, output={"title": "Hello", "blog_id": 42}
    )
    orphan = make_record(
        shop_id, 2, ContentCategory.ARTICLE, age=5, output={"title": "Lost", "blog_id": "7"}
    )

    grouped = ResponseAssembler().assemble([orphan, linked, blog])

    assert grouped.blogs == [{"title": "News", "contentId": "42", "category": "BLOG"}]
    first, second = grouped.articles
    assert first["contentId"] == "1"
    assert first["blog"] == {"title": "News", "contentId": "42", "category": "BLOG"}
    assert second["contentId"] == "2"
    assert second["blog"] is None


def test_linked_blog_is_a_copy() -> None:
    shop_id = uuid4()
    blog = make_record(shop_id, 42, ContentCategory.BLOG)
    article = make_record(shop_id, 1, ContentCategory.ARTICLE, output={"blog_id": "42"})

    grouped = ResponseAssembler().assemble([blog, article])
    grouped.articles[0]["blog"]["title"] = "changed"

    assert grouped.blogs[0]["title"] == "blog 42"


def test_groups_are_ordered_newest_first() -> None:
    shop_id = uuid4()
    records = [
        make_record(shop_id, "old", age=30),
        make_record(shop_id, "new", age=1),
        make_record(shop_id, "mid", age=10),
    ]

    grouped = ResponseAssembler().assemble(records)

    assert [entry["contentId"] for entry in grouped.products] == ["new", "mid", "old"]
    assert grouped.blogs == []
    assert grouped.articles == []
    assert len(grouped) == 3


def test_entry_keeps_stored_output() -> None:
    shop_id = uuid4()
    record = make_record(
        shop_id, 5, output={"title": "Shirt", "handle": "shirt", "images": ["a.png"]}
    )

    grouped = ResponseAssembler().assemble([record])

    assert grouped.products == [
        {
            "title": "Shirt",
            "handle": "shirt",
            "images": ["a.png"],
            "contentId": "5",
            "category": "PRODUCT",
        }
    ]
