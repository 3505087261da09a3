"""Tests for HTML to Markdown conversion."""

import hashlib

import pytest
from bs4 import BeautifulSoup

from web2md.conversion import HtmlToMarkdown, MetadataHeaderBuilder, index_table_rows
from web2md.conversion.markdown import TITLE_UNDERLINE, data_url_placeholder
from web2md.models import ConversionOptions, Rule

DATA_URL = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUg=="


def convert(html: str, **options) -> str:
    soup = BeautifulSoup(html, "html.parser")
    return HtmlToMarkdown(ConversionOptions(**options)).convert(soup, index_table_rows(soup))


class TestBaseline:
    """Tests for the baseline Markdown output."""

    def test_paragraphs(self):
        """Test paragraph separation."""
        assert convert("<p>One</p><p>Two</p>") == "One\n\nTwo"

    def test_setext_headings(self):
        """Test underlined level 1 and 2 headings."""
        assert convert("<h1>Title</h1><p>Body</p>") == "Title\n=====\n\nBody"
        assert convert("<h2>Sub</h2>") == "Sub\n---"

    def test_atx_headings(self):
        """Test hash headings."""
        assert convert("<h2>Sub</h2>", heading_style="atx") == "## Sub"
        assert convert("<h3>Deep</h3>") == "### Deep"

    def test_emphasis_and_strong(self):
        """Test inline emphasis."""
        assert convert("<p><strong>Bold</strong> and <em>italic</em> text.</p>") == "**Bold** and *italic* text."

    def test_underscore_delimiters(self):
        """Test the underscore emphasis style."""
        assert convert("<p><b>Bold</b> <i>italic</i></p>", strong_em_symbol="_") == "__Bold__ _italic_"

    def test_flanking_whitespace(self):
        """Test that whitespace at element edges moves outside the markers."""
        assert convert("<p>Hello<em> world</em></p>") == "Hello *world*"

    def test_line_break(self):
        """Test hard line breaks."""
        assert convert("<p>a<br>b</p>") == "a  \nb"

    def test_unordered_list(self):
        """Test bullet lists, ignoring source indentation."""
        html = "<ul>\n  <li>One</li>\n  <li>Two</li>\n</ul>"

        assert convert(html) == "* One\n* Two"

    def test_bullet_marker(self):
        """Test a configurable bullet marker."""
        assert convert("<ul><li>One</li></ul>", bullet_list_marker="-") == "- One"

    def test_ordered_list_with_start(self):
        """Test ordered list numbering from the start attribute."""
        assert convert('<ol start="3"><li>a</li><li>b</li></ol>') == "3. a\n4. b"
        assert convert("<ol><li>a</li><li>b</li></ol>") == "1. a\n2. b"

    def test_multi_paragraph_list_item(self):
        """Test that continuation lines are indented."""
        result = convert("<ul><li><p>One</p><p>Two</p></li></ul>")

        assert result == "* One\n\n  Two"

    def test_blockquote(self):
        """Test block quotes."""
        result = convert("<blockquote><p>Quote</p><p>More</p></blockquote>")

        assert result.startswith("> Quote\n>")
        assert result.endswith("\n> More")

    def test_fenced_code_block(self):
        """Test fenced code with a language class."""
        html = '<pre><code class="language-python">print("hi")</code></pre>'

        assert convert(html) == '```python\nprint("hi")\n```'

    def test_code_block_keeps_markdown_syntax(self):
        """Test that code is never escaped."""
        assert convert("<pre><code>a_b = *c</code></pre>") == "```\na_b = *c\n```"

    def test_inline_code(self):
        """Test inline code keeps inner whitespace and surrounding text."""
        assert convert("<p>Use <code>x = 1</code> here</p>") == "Use `x = 1` here"

    def test_links(self):
        """Test inline links with titles."""
        assert convert('<p><a href="https://example.com/page">Link Text</a></p>') == "[Link Text](https://example.com/page)"
        assert convert('<a href="https://example.com/a" title="T">x</a>') == '[x](https://example.com/a "T")'

    def test_anchor_without_href(self):
        """Test that anchors without href render their text."""
        assert convert('<p><a name="top">Top</a></p>') == "Top"

    def test_horizontal_rule(self):
        """Test thematic breaks."""
        assert convert("<p>a</p><hr><p>b</p>") == "a\n\n---\n\nb"


class TestEscaping:
    """Tests for escaping Markdown syntax found in text."""

    @pytest.mark.parametrize(
        "html,expected",
        [
            ("<p>2*3*4 is *not* emphasis</p>", "2\\*3\\*4 is \\*not\\* emphasis"),
            ("<p>snake_case_name</p>", "snake\\_case\\_name"),
            ("<p># not a heading</p>", "\\# not a heading"),
            ("<p>[not a link](x)</p>", "\\[not a link\\](x)"),
            ("<p>`not code`</p>", "\\`not code\\`"),
            ("<p>&gt; not quote</p>", "\\> not quote"),
            ("<p>a\\b</p>", "a\\\\b"),
            ("<p>1. Not a list</p>", "1\\. Not a list"),
            ("<p>- not a bullet</p>", "\\- not a bullet"),
        ],
    )
    def test_text_stays_literal(self, html, expected):
        """Test each kind of Markdown syntax in plain text."""
        assert convert(html) == expected

    def test_hash_inside_text_is_kept(self):
        """Test that hashes that cannot start a heading are left alone."""
        assert convert("<p>Issue #42</p>") == "Issue #42"


class TestOverlay:
    """Tests for the conversion overlay rules."""

    def test_irrelevant_tags_are_dropped(self):
        """Test that scripts, forms and inline SVG are dropped with their content."""
        html = (
            "<p>Text</p><script>var x = 1;</script><noscript>Enable JS</noscript>"
            "<textarea>draft</textarea><select><option>One</option></select><svg><text>logo</text></svg>"
        )

        assert convert(html) == "Text"

    def test_title_rendered_as_heading(self):
        """Test that a <title> in the content renders as an underlined heading."""
        result = convert("<title>Doc</title><p>x</p>")

        assert result.startswith(f"Doc\n{TITLE_UNDERLINE}")

    def test_whitespace_only_paragraph(self):
        """Test that paragraphs without text do not add blank lines."""
        assert convert("<p>a</p><p>   </p><p>b</p>") == "a\n\nb"
        assert convert("<p>a</p><p><br></p><p>b</p>") == "a\n\nb"

    @pytest.mark.parametrize(
        "mode,expected",
        [
            ("all", "![A cat](/cat.png)"),
            ("alt", "A cat"),
            ("alt_p", "(A cat)"),
            ("none", ""),
        ],
    )
    def test_retain_images(self, mode, expected):
        """Test each image retention mode."""
        assert convert('<p><img src="/cat.png" alt="A cat"></p>', retain_images=mode) == expected

    def test_retain_none_drops_alt_text(self):
        """Test that no image markup or alt text survives with mode none."""
        result = convert('<p>Before</p><p><img src="/cat.png" alt="A cat"></p><p>After</p>', retain_images="none")

        assert result == "Before\n\nAfter"

    def test_image_title(self):
        """Test image titles in full image references."""
        assert convert('<img src="/a.png" alt="A" title="Tip">') == '![A](/a.png "Tip")'

    def test_data_url_placeholder(self):
        """Test data-URL images become stable blob placeholders."""
        digest = hashlib.md5(DATA_URL.encode("utf-8")).hexdigest()

        result = convert(f'<p><img src="{DATA_URL}" alt="dot"></p>', img_data_url_to_object_url=True)

        assert result == f"![dot](blob:{digest})"

    def test_data_url_placeholder_is_deterministic(self):
        """Test that equal sources give equal placeholders across conversions."""
        html = f'<p><img src="{DATA_URL}" alt="dot"></p>'

        first = convert(html, img_data_url_to_object_url=True)
        second = convert(html, img_data_url_to_object_url=True)

        assert first == second
        assert data_url_placeholder(DATA_URL) == data_url_placeholder(DATA_URL)
        assert data_url_placeholder(DATA_URL) != data_url_placeholder(DATA_URL + "=")

    def test_data_url_placeholder_independent_of_retention(self):
        """Test that data-URL placeholders apply even when images are dropped."""
        html = f'<p><img src="{DATA_URL}" alt="dot"><img src="/cat.png" alt="cat"></p>'

        result = convert(html, img_data_url_to_object_url=True, retain_images="none")

        assert result.startswith("![dot](blob:")
        assert "cat" not in result

    def test_data_url_kept_when_disabled(self):
        """Test that data URLs are left as-is by default."""
        assert convert(f'<img src="{DATA_URL}" alt="dot">') == f"![dot]({DATA_URL})"

    def test_custom_rule(self):
        """Test a caller-supplied rule."""
        shout = Rule("p", lambda content, node, ctx: content.upper() + "\n\n")

        assert convert("<p>hi</p>", custom_rules={"shout": shout}) == "HI"

    def test_custom_rules_override_gfm(self):
        """Test that caller rules win over built-in rules."""
        dashes = Rule("del", lambda content, node, ctx: f"--{content}--")

        assert convert("<p><del>x</del></p>", custom_rules={"dashes": dashes}) == "--x--"

    def test_later_custom_rule_wins(self):
        """Test that later custom rules take precedence over earlier ones."""
        rules = {
            "first": Rule("strong", lambda content, node, ctx: f"<1>{content}"),
            "second": Rule("strong", lambda content, node, ctx: f"<2>{content}"),
        }

        assert convert("<p><strong>x</strong></p>", custom_rules=rules) == "<2>x"

    def test_custom_keep(self):
        """Test that kept elements are emitted as markup, even dropped ones."""
        html = "<p>Before</p><textarea>notes</textarea>"

        assert "notes" not in convert(html)
        assert convert(html, custom_keep=lambda node: node.name == "textarea") == (
            "Before\n\n<textarea>notes</textarea>"
        )

    def test_custom_keep_blank_element(self):
        """Test that a kept element without text is emitted instead of dropped."""
        result = convert('<p>Logo</p><svg><circle r="1"/></svg>', custom_keep=lambda node: node.name == "svg")

        assert result.startswith("Logo\n\n<svg>")
        assert "<circle" in result
        assert result.endswith("</svg>")


class TestMetadataHeaderBuilder:
    """Tests for MetadataHeaderBuilder."""

    @pytest.fixture
    def builder(self):
        return MetadataHeaderBuilder()

    def test_full_header(self, builder):
        """Test a header with every field."""
        result = builder.build(
            title="Post",
            url="https://example.com/post",
            published_time="2024-03-05T10:00:00.000Z",
        )

        assert result == (
            "Title: Post\n\nURL Source: https://example.com/post\n\n"
            "Published Time: 2024-03-05T10:00:00.000Z\n\nMarkdown Content:"
        )

    def test_omits_missing_fields(self, builder):
        """Test that empty fields are left out."""
        assert builder.build(title="Untitled") == "Title: Untitled\n\nMarkdown Content:"
        assert builder.build(title="T", url="", published_time=None) == "Title: T\n\nMarkdown Content:"
