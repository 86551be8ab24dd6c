import textwrap

import pytest


@pytest.fixture
def rss_document():
    return textwrap.dedent(
        """\
        <?xml version="1.0" encoding="UTF-8"?>
        <rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
          <channel>
            <title>Example &amp; Co</title>
            <link>https://example.com</link>
            <description>Example feed</description>
            <item>
              <title>Tom &amp; Jerry &lt;3</title>
              <link>https://example.com/a</link>
              <description><![CDATA[<p>Hello <b>world</b> &amp; more</p>]]></description>
              <dc:creator>Jane Doe</dc:creator>
              <category>News</category>
              <category>Ignored</category>
              <guid isPermaLink="false">item-a</guid>
              <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
            </item>
            <item>
              <description>Plain &lt;i&gt;escaped&lt;/i&gt; body</description>
              <author>editor@example.com</author>
              <comments>https://example.com/b#comments</comments>
              <enclosure url="https://example.com/b.mp3" length="1024" type="audio/mpeg" />
              <dc:date>2024-01-02T08:30:00Z</dc:date>
            </item>
          </channel>
        </rss>
        """
    )


@pytest.fixture
def atom_document():
    return textwrap.dedent(
        """\
        <?xml version="1.0" encoding="utf-8"?>
        <feed xmlns="http://www.w3.org/2005/Atom">
          <title>Atom Example</title>
          <subtitle>All about rss and atom</subtitle>
          <link href="https://atom.example.com/" />
          <entry>
            <title>First entry</title>
            <link rel="alternate" href="https://atom.example.com/1" />
            <id>urn:uuid:1</id>
            <content type="html"><![CDATA[<p>Full content</p>]]></content>
            <summary>Short summary</summary>
            <author>
              <name>Alice</name>
              <email>alice@example.com</email>
            </author>
            <published>2024-03-01T10:00:00Z</published>
            <updated>2024-03-02T10:00:00Z</updated>
          </entry>
          <entry>
            <title>Second entry</title>
            <link href="https://atom.example.com/2"/>
            <id>urn:uuid:2</id>
            <summary>Only a summary</summary>
            <updated>2024-03-03T10:00:00+02:00</updated>
          </entry>
        </feed>
        """
    )
