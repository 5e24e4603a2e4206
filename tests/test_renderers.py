from datetime import date
from xml.etree import ElementTree as ET

from blog_sitemap import renderers
from blog_sitemap.models import Category, Post

NS = {"sm": renderers.SITEMAP_NAMESPACE}
TODAY = date(2024, 6, 1)


def _locs(xml: str):
    root = ET.fromstring(xml)
    return [loc.text for loc in root.findall("sm:url/sm:loc", NS)]


def test_render_post_entry():
    posts = [Post(slug="hello-world", modified=date(2024, 1, 15), category_slug="news")]

    xml = renderers.render(posts, [], "https://example.com", today=TODAY)

    assert "<loc>https://example.com/news/hello-world</loc>" in xml
    assert "<lastmod>2024-01-15</lastmod>" in xml
    assert "<changefreq>monthly</changefreq>" in xml
    assert "<priority>0.6</priority>" in xml


def test_render_category_entries_skip_empty_categories():
    categories = [Category("news", 3), Category("empty", 0)]

    xml = renderers.render([], categories, "https://example.com", today=TODAY)

    assert _locs(xml) == ["https://example.com/blog/news"]
    assert "<lastmod>2024-06-01</lastmod>" in xml
    assert "<changefreq>weekly</changefreq>" in xml
    assert "<priority>0.7</priority>" in xml


def test_categories_precede_posts_and_post_order_is_kept():
    posts = [
        Post(slug="second", category_slug="news"),
        Post(slug="first", category_slug="events"),
    ]
    categories = [Category("news", 1), Category("events", 2)]

    xml = renderers.render(posts, categories, "https://example.com/", today=TODAY)

    assert _locs(xml) == [
        "https://example.com/blog/news",
        "https://example.com/blog/events",
        "https://example.com/news/second",
        "https://example.com/events/first",
    ]


def test_post_without_modified_date_uses_today():
    entries = renderers.build_entries(
        [Post(slug="undated")], [], "https://example.com", TODAY
    )

    assert entries[0].lastmod == TODAY
    assert entries[0].location == "https://example.com/blog/undated"


def test_posts_without_slug_are_not_rendered():
    entries = renderers.build_entries(
        [Post(slug=""), Post(slug="kept")], [], "https://example.com", TODAY
    )

    assert [entry.location for entry in entries] == ["https://example.com/blog/kept"]


def test_render_escapes_urls():
    xml = renderers.render(
        [Post(slug="q&a", category_slug="news")], [], "https://example.com", today=TODAY
    )

    assert "<loc>https://example.com/news/q&amp;a</loc>" in xml
    assert _locs(xml) == ["https://example.com/news/q&a"]


def test_render_is_well_formed_with_one_url_per_entry():
    posts = [Post(slug=f"p{i}", modified=date(2024, 1, i + 1)) for i in range(3)]

    xml = renderers.render(posts, [Category("news", 1)], "https://example.com", today=TODAY)

    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<urlset')
    root = ET.fromstring(xml.encode("utf-8"))
    assert root.tag == "{http://www.sitemaps.org/schemas/sitemap/0.9}urlset"
    assert len(root.findall("sm:url", NS)) == 4
    for url in root.findall("sm:url", NS):
        assert [child.tag.split("}")[1] for child in url] == [
            "loc",
            "lastmod",
            "changefreq",
            "priority",
        ]


def test_render_empty_sitemap_has_no_entries():
    xml = renderers.render_empty_sitemap()

    root = ET.fromstring(xml.encode("utf-8"))
    assert root.tag == "{http://www.sitemaps.org/schemas/sitemap/0.9}urlset"
    assert root.findall("sm:url", NS) == []


def test_render_defaults_today_to_utc_date(monkeypatch):
    monkeypatch.setattr(renderers, "utc_today", lambda: date(1999, 12, 31))

    xml = renderers.render([Post(slug="a")], [], "https://example.com")

    assert "<lastmod>1999-12-31</lastmod>" in xml
