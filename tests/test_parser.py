from datetime import datetime, timezone

from rss_aggregator import parser
from rss_aggregator.aggregator import sort_items
from rss_aggregator.models import FeedEnclosure, FeedSource


def test_parse_rss_extracts_fields(rss_document):
    items = parser.parse(rss_document, "https://example.com/feed", "Example")

    assert len(items) == 2
    first = items[0]
    assert first.title == "Tom & Jerry <3"
    assert first.link == "https://example.com/a"
    assert first.description == "<p>Hello <b>world</b> &amp; more</p>"
    assert first.author == "Jane Doe"
    assert first.category == "News"
    assert first.guid == "item-a"
    assert first.pub_date == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert first.source == FeedSource(url="https://example.com/feed", title="Example")


def test_parse_rss_applies_defaults_and_fallbacks(rss_document):
    second = parser.parse(rss_document, "https://example.com/feed", "Example")[1]

    assert second.title == "Untitled"
    assert second.link == ""
    assert second.description == "Plain <i>escaped</i> body"
    assert second.author == "editor@example.com"
    assert second.comments == "https://example.com/b#comments"
    assert second.enclosure == FeedEnclosure(
        url="https://example.com/b.mp3", length=1024, type="audio/mpeg"
    )
    assert second.guid is None
    assert second.category is None
    assert second.pub_date == datetime(2024, 1, 2, 8, 30, tzinfo=timezone.utc)


def test_parse_without_source_title_leaves_source_unset(rss_document):
    items = parser.parse(rss_document, "https://example.com/feed")

    assert all(item.source is None for item in items)


def test_parse_atom_extracts_fields(atom_document):
    items = parser.parse(atom_document, "https://atom.example.com/feed", "Atom")

    assert len(items) == 2
    first, second = items
    assert first.title == "First entry"
    assert first.link == "https://atom.example.com/1"
    assert first.description == "<p>Full content</p>"
    assert first.author == "Alice"
    assert first.guid == "urn:uuid:1"
    assert first.pub_date == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    assert first.source.title == "Atom"

    assert second.link == "https://atom.example.com/2"
    assert second.description == "Only a summary"
    assert second.author is None
    assert second.pub_date == datetime(2024, 3, 3, 8, 0, tzinfo=timezone.utc)


def test_atom_document_with_stray_rss_text_uses_atom_path(atom_document):
    assert "rss" in atom_document
    assert parser.is_atom(atom_document)

    items = parser.parse(atom_document, "https://atom.example.com/feed")

    assert [item.guid for item in items] == ["urn:uuid:1", "urn:uuid:2"]


def test_rss_with_atom_prefix_namespace_is_not_atom():
    document = (
        '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom"><channel>'
        "<item><title>One</title></item></channel></rss>"
    )

    assert not parser.is_atom(document)
    assert [item.title for item in parser.parse(document, "u")] == ["One"]


def test_parse_returns_empty_list_for_unrecognised_input():
    assert parser.parse("this is not a feed", "u") == []
    assert parser.parse("<rss><channel><item><title>broken", "u") == []


def test_invalid_date_yields_no_timestamp():
    document = "<rss><channel><item><pubDate>not a date</pubDate></item></channel></rss>"

    items = parser.parse(document, "u")

    assert items[0].pub_date is None


def test_partial_dates_yield_no_timestamp():
    dated = "<item><title>dated</title><pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate></item>"
    weekday = "<item><title>weekday</title><pubDate>Tuesday</pubDate></item>"
    time_only = "<item><title>time</title><pubDate>12:30</pubDate></item>"
    document = f"<rss><channel>{dated}{weekday}{time_only}</channel></rss>"

    items = parser.parse(document, "u")

    assert [item.pub_date is None for item in items] == [False, True, True]
    assert [item.title for item in sort_items(items)] == ["dated", "weekday", "time"]


def test_parse_date_accepts_date_only_values():
    assert parser.parse_date("2024-01-02") == datetime(2024, 1, 2, tzinfo=timezone.utc)
    assert parser.parse_date("01 Jan") is None


def test_out_of_range_date_does_not_raise():
    document = (
        '<feed xmlns="http://www.w3.org/2005/Atom"><entry><title>Edge</title>'
        "<updated>0001-01-01T00:00:00+01:00</updated></entry></feed>"
    )

    items = parser.parse(document, "u")

    assert items[0].title == "Edge"
    assert items[0].pub_date is None


def test_item_tag_matching_is_case_insensitive():
    document = "<RSS><CHANNEL><ITEM><TITLE>Shouting</TITLE></ITEM></CHANNEL></RSS>"

    assert parser.parse(document, "u")[0].title == "Shouting"


def test_extract_tag_falls_back_to_namespaced_variant():
    xml = "<media:title type='plain'> Clip &quot;one&quot; </media:title>"

    assert parser.extract_tag(xml, "title") == 'Clip "one"'
    assert parser.extract_tag(xml, "missing") is None


def test_extract_tag_with_prefix_does_not_retry():
    assert parser.extract_tag("<creator>Bob</creator>", "dc:creator") is None


def test_extract_cdata_returns_content_verbatim():
    xml = "<description>  <![CDATA[ a &amp; <b>b</b> ]]>  </description>"

    assert parser.extract_cdata(xml, "description") == "a &amp; <b>b</b>"
    assert parser.extract_cdata("<description>plain</description>", "description") is None


def test_decode_entities_is_single_pass():
    assert parser.decode_entities("&amp;lt; &lt;&gt;&quot;&apos;&amp;") == "&lt; <>\"'&"


def test_parse_date_honours_rfc822_zone_names():
    parsed = parser.parse_date("Mon, 01 Jan 2024 07:00:00 EST")

    assert parsed == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert parsed.tzinfo == timezone.utc


def test_parse_date_treats_naive_values_as_utc():
    assert parser.parse_date("2024-05-06 07:08:09") == datetime(
        2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc
    )
    assert parser.parse_date("") is None


def test_extract_feed_metadata_for_rss(rss_document):
    assert parser.extract_feed_metadata(rss_document) == {
        "title": "Example & Co",
        "description": "Example feed",
        "link": "https://example.com",
    }


def test_extract_feed_metadata_for_atom(atom_document):
    assert parser.extract_feed_metadata(atom_document) == {
        "title": "Atom Example",
        "description": "All about rss and atom",
        "link": "https://atom.example.com/",
    }


def test_extract_feed_metadata_without_channel_is_empty():
    assert parser.extract_feed_metadata("<rss></rss>") == {}
