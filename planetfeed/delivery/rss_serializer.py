"""
RSS 2.0 Serializer
=================

Renders a CombinedFeed as an RSS 2.0 document. Contributors and item
update times use Atom elements under the ``a10`` prefix.
"""

import re
from datetime import datetime, timezone
from email.utils import format_datetime
from xml.etree import ElementTree as ET

from ..models import CombinedFeed, Contributor, FeedItem, MIN_TIMESTAMP


ATOM_NS = "http://www.w3.org/2005/Atom"
_XML_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")
# Code points outside the XML 1.0 Char production
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

ET.register_namespace("a10", ATOM_NS)


def _atom(tag: str) -> str:
    return f"{{{ATOM_NS}}}{tag}"


def _rfc822(value: datetime) -> str:
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def _text_element(parent: ET.Element, tag: str, text) -> ET.Element:
    element = ET.SubElement(parent, tag)
    element.text = _XML_ILLEGAL.sub("", text) if text else text
    return element


class RssSerializer:
    """Serializes CombinedFeed values to RSS 2.0 XML bytes."""

    encoding = "utf-8"

    def serialize(self, feed: CombinedFeed) -> bytes:
        rss = ET.Element("rss", {"version": "2.0"})
        channel = ET.SubElement(rss, "channel")

        _text_element(channel, "title", feed.title)
        _text_element(channel, "link", feed.url)
        _text_element(channel, "description", feed.description)
        _text_element(channel, "language", feed.language)
        if feed.copyright:
            _text_element(channel, "copyright", feed.copyright)
        _text_element(channel, "lastBuildDate", _rfc822(feed.last_updated))

        image = ET.SubElement(channel, "image")
        _text_element(image, "url", feed.image_url)
        _text_element(image, "title", feed.title)
        _text_element(image, "link", feed.url)

        for contributor in feed.contributors:
            self._write_contributor(channel, contributor)

        for item in feed.items:
            self._write_item(channel, item)

        return ET.tostring(rss, encoding=self.encoding, xml_declaration=True)

    def _write_contributor(self, channel: ET.Element, contributor: Contributor) -> None:
        element = ET.SubElement(channel, _atom("contributor"))
        _text_element(element, _atom("name"), contributor.name)
        if contributor.website:
            _text_element(element, _atom("uri"), contributor.website)
        if contributor.email:
            _text_element(element, _atom("email"), contributor.email)

    def _write_item(self, channel: ET.Element, item: FeedItem) -> None:
        element = ET.SubElement(channel, "item")

        if item.guid:
            is_permalink = "true" if item.guid.startswith(("http://", "https://")) else "false"
            guid = _text_element(element, "guid", item.guid)
            guid.set("isPermaLink", is_permalink)
        if item.link:
            _text_element(element, "link", item.link)
        if item.title is not None:
            _text_element(element, "title", item.title)
        if item.summary is not None:
            _text_element(element, "description", item.summary)
        if item.published != MIN_TIMESTAMP:
            _text_element(element, "pubDate", _rfc822(item.published))
        if item.updated != MIN_TIMESTAMP:
            _text_element(element, _atom("updated"), item.updated.isoformat())
        for category in item.categories:
            _text_element(element, "category", category)

        for name, value in item.extensions.items():
            if _XML_NAME.match(name):
                _text_element(element, name, value)
