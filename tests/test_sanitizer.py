"""
Tests for the three sanitization modes.
"""

import pytest

from ixtract.parser.sanitizer import (
    TAG_LIKE,
    filter_style,
    format_text,
    sanitize_html,
    sanitize_html_enhanced,
    sanitize_html_preserve_tables,
)

HOSTILE = [
    "<p>Hello <b>World</b></p>",
    "<script>alert('x')</script>text",
    "&lt;script&gt;alert(1)&lt;/script&gt;",
    "&amp;lt;b&amp;gt;nested",
    "<img src=x onerror=alert(1)>",
    "<!-- note --><div>a</div>",
    "<a href='javascript:void(0)'>link</a>",
    "<<b>>broken",
]


@pytest.mark.parametrize("content", HOSTILE)
def test_strip_all_leaves_nothing_tag_like(content):
    assert not TAG_LIKE.search(sanitize_html(content))


def test_strip_all_keeps_text():
    assert sanitize_html("<p>Hello <b>World</b></p>") == "Hello World"
    assert sanitize_html("&lt;script&gt;alert(1)&lt;/script&gt;") == "alert(1)"


def test_strip_all_passes_plain_text_through():
    assert sanitize_html("a < b") == "a < b"
    assert sanitize_html("c > d") == "c > d"
    assert sanitize_html("売上高 1,000") == "売上高 1,000"
    assert sanitize_html(None) == ""
    assert sanitize_html(42) == ""


def test_preserve_tables_drops_attributes_and_other_tags():
    content = (
        '<!DOCTYPE html><div class="wrap"><table border="1" onclick="x()">'
        "<tr><td style='color:red'><span class='x'>Text</span></td></tr>"
        "</table><script>bad()</script></div>"
    )

    assert sanitize_html_preserve_tables(content) == (
        "<table><tr><td>Text</td></tr></table>bad()"
    )


def test_preserve_tables_keeps_structure_tags():
    content = "<TABLE><THEAD><TR><TH>A</TH></TR></THEAD><tbody><tr><td>1<br/>2</td></tr></tbody></TABLE>"
    out = sanitize_html_preserve_tables(content)

    assert out.startswith("<table><thead><tr><th>A</TH>")
    assert "<br>" in out
    assert "<tbody>" in out


def test_enhanced_flattens_script_to_text():
    out = sanitize_html_enhanced("<div><script>alert('dangerous');</script><p>ok</p></div>")

    assert "<script" not in out
    assert "alert('dangerous');" in out
    assert "<p>ok</p>" in out


def test_enhanced_keeps_inline_xbrl_attributes():
    out = sanitize_html_enhanced(
        '<table><tr><td onclick="x()">'
        '<ix:nonFraction contextRef="C1" name="jppfs_cor:Assets" unitRef="JPY" '
        'decimals="-6" onclick="y()" data-foo="1">100</ix:nonFraction>'
        "</td></tr></table>"
    )

    assert "<ix:nonfraction" in out
    assert 'contextref="C1"' in out
    assert 'name="jppfs_cor:Assets"' in out
    assert 'unitref="JPY"' in out
    assert 'decimals="-6"' in out
    assert "onclick" not in out
    assert "data-foo" not in out


def test_enhanced_filters_styles():
    out = sanitize_html_enhanced(
        '<table><tr><th style="color:red; text-align:right">A</th>'
        '<td style="background:url(evil.png)">B</td>'
        '<td style="padding-left: 20px; width: expression(alert(1))">C</td></tr></table>'
    )

    assert 'style="text-align: right"' in out
    assert 'style="padding-left: 20px"' in out
    assert "color" not in out
    assert "url(" not in out
    assert "expression" not in out


def test_enhanced_unwraps_or_flattens_disallowed_elements():
    out = sanitize_html_enhanced(
        '<custom><b>bold</b></custom><font color="red">plain</font><!-- secret -->'
        '<a href="javascript:x()">link</a>'
    )

    assert out == "<b>bold</b>plainlink"


def test_enhanced_empty_input():
    assert sanitize_html_enhanced("") == ""
    assert sanitize_html_enhanced(None) == ""


def test_filter_style_and_format_text():
    assert filter_style("FONT-WEIGHT: bold;position:absolute;;") == "font-weight: bold"
    assert format_text("  a \n\t b ") == "a b"
    assert format_text(None) == ""
