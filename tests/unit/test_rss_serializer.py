"""
Unit Tests for RSS Serializer
============================

Tests for the RSS 2.0 rendering of combined feeds.
"""

import pytest
from dataclasses import replace
from xml.etree import ElementTree as ET

from planetfeed.delivery.rss_serializer import RssSerializer, ATOM_NS
from planetfeed.ingestion.feed_fetcher import FeedFetcher
from planetfeed.models import CombinedFeed, Contributor, MIN_TIMESTAMP


A10 = {"a10": ATOM_NS}


@pytest.fixture
def combined_feed(now, make_item):
    newest = make_item(
        "Python packaging",
        hours_ago=1,
        updated_hours_ago=0,
        summary="<p>wheels</p>",
        categories=("Python", "Packaging"),
        extensions={"keywords": "python, pip", "bad name": "dropped"},
        guid="https://ada.example.com/packaging",
        link="https://ada.example.com/packaging",
    )
    undated = replace(make_item("Python undated", guid="tag:ada,1"), published=MIN_TIMESTAMP, updated=MIN_TIMESTAMP)
    return CombinedFeed(
        title="Planet Test",
        description="Test combined feed",
        url="https://planet.test/",
        image_url="https://planet.test/logo.png",
        language="en",
        last_updated=now,
        copyright="Posts belong to their authors",
        contributors=(Contributor("Ada Lovelace", "ada@example.com", "https://ada.example.com/"),),
        items=(newest, undated),
    )


def _render(feed):
    data = RssSerializer().serialize(feed)
    assert data.startswith(b"<?xml")
    return ET.fromstring(data)


class TestRssSerializer:
    """Test document structure."""

    def test_channel_envelope(self, combined_feed):
        rss = _render(combined_feed)
        channel = rss.find("channel")

        assert rss.tag == "rss"
        assert rss.get("version") == "2.0"
        assert channel.findtext("title") == "Planet Test"
        assert channel.findtext("link") == "https://planet.test/"
        assert channel.findtext("description") == "Test combined feed"
        assert channel.findtext("language") == "en"
        assert channel.findtext("copyright") == "Posts belong to their authors"
        assert channel.findtext("lastBuildDate") == "Sat, 17 Oct 2026 12:00:00 GMT"
        assert channel.findtext("image/url") == "https://planet.test/logo.png"

    def test_contributors(self, combined_feed):
        channel = _render(combined_feed).find("channel")

        contributors = channel.findall("a10:contributor", A10)
        assert len(contributors) == 1
        assert contributors[0].findtext("a10:name", namespaces=A10) == "Ada Lovelace"
        assert contributors[0].findtext("a10:email", namespaces=A10) == "ada@example.com"
        assert contributors[0].findtext("a10:uri", namespaces=A10) == "https://ada.example.com/"

    def test_items_in_feed_order(self, combined_feed):
        items = _render(combined_feed).find("channel").findall("item")

        assert [item.findtext("title") for item in items] == ["Python packaging", "Python undated"]

    def test_item_fields(self, combined_feed):
        item = _render(combined_feed).find("channel").find("item")

        assert item.findtext("link") == "https://ada.example.com/packaging"
        assert item.findtext("description") == "<p>wheels</p>"
        assert item.findtext("pubDate") == "Sat, 17 Oct 2026 11:00:00 GMT"
        assert item.findtext("a10:updated", namespaces=A10) == "2026-10-17T12:00:00+00:00"
        assert [c.text for c in item.findall("category")] == ["Python", "Packaging"]
        assert item.find("guid").get("isPermaLink") == "true"
        assert item.findtext("keywords") == "python, pip"

    def test_invalid_extension_names_skipped(self, combined_feed):
        item = _render(combined_feed).find("channel").find("item")

        assert all(child.text != "dropped" for child in item)

    def test_undated_item_has_no_dates(self, combined_feed):
        undated = _render(combined_feed).find("channel").findall("item")[1]

        assert undated.find("pubDate") is None
        assert undated.find("a10:updated", A10) is None
        assert undated.find("guid").get("isPermaLink") == "false"

    def test_empty_feed(self, combined_feed):
        empty = replace(combined_feed, items=(), contributors=(), copyright=None)
        channel = _render(empty).find("channel")

        assert channel.findall("item") == []
        assert channel.find("copyright") is None

    def test_url_guid_is_permalink_even_when_link_differs(self, combined_feed, make_item):
        item = make_item("Python mirror", guid="https://mirror.example.com/post",
                         link="https://ada.example.com/post")
        rendered = _render(replace(combined_feed, items=(item,))).find("channel").find("item")

        assert rendered.find("guid").get("isPermaLink") == "true"

    def test_control_characters_from_remote_feed_are_stripped(self, combined_feed):
        source = (
            b'<?xml version="1.0" encoding="UTF-8"?>\n'
            b'<rss version="2.0"><channel><title>t</title><link>http://example.com</link>'
            b'<description>d</description><item><title>Python tips</title>'
            b'<link>http://example.com/1</link>'
            b'<description><![CDATA[py\x0bthon]]></description>'
            b'<pubDate>Thu, 05 Sep 2024 12:00:00 GMT</pubDate></item></channel></rss>'
        )
        items = FeedFetcher().parse(source, "https://example.com/feed.xml")
        assert items

        item = _render(replace(combined_feed, items=tuple(items))).find("channel").find("item")

        assert item.findtext("description") == "python"

    def test_illegal_xml_characters_removed_from_all_text(self, combined_feed, make_item):
        item = make_item("Py\x0cthon \x01tips", summary="async\x00 io\ufffe", categories=("Py\x1fthon",))
        rendered = _render(replace(combined_feed, items=(item,))).find("channel").find("item")

        assert rendered.findtext("title") == "Python tips"
        assert rendered.findtext("description") == "async io"
        assert rendered.findtext("category") == "Python"
