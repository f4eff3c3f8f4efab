"""Tests for the regex text patcher used on unparseable CSS."""

from visual_inspector.stylesheet import CssChange, mutate_css, patch_css_text


class TestFallbackEquivalence:
    def test_broken_tail_matches_structured_result(self):
        valid = "h1 { color: red; }"
        change = CssChange("h1", "color", "blue")

        structured = mutate_css(valid, change)
        fallback = mutate_css(valid + "\n.broken", change)

        assert fallback.modified
        assert fallback.content == structured.content + "\n.broken"

    def test_broken_tail_insert(self):
        result = mutate_css("h1 { color: red; }\n.broken", CssChange("h1", "margin", "0"))
        assert result.content == "h1 { color: red;\n  margin: 0;\n}\n.broken"


class TestPatchCssText:
    def test_replaces_declaration(self):
        result = patch_css_text(".x { color: red; }", CssChange(".x", "color", "blue"))
        assert result.modified
        assert result.content == ".x { color: blue; }"

    def test_replaces_last_declaration_without_semicolon(self):
        result = patch_css_text(".x { color: red }", CssChange(".x", "color", "blue"))
        assert result.content == ".x { color: blue; }"

    def test_property_is_anchored(self):
        result = patch_css_text(
            ".x { background-color: red; }", CssChange(".x", "color", "blue")
        )
        assert "background-color: red;" in result.content
        assert "\n  color: blue;\n}" in result.content

    def test_selector_is_anchored(self):
        css = "a.btn { color: red; } .btn { color: red; }"
        result = patch_css_text(css, CssChange(".btn", "color", "blue"))
        assert result.content == "a.btn { color: red; } .btn { color: blue; }"

    def test_selector_spacing_is_normalized(self):
        result = patch_css_text("ul>li { color: red; }", CssChange("ul > li", "color", "blue"))
        assert result.content == "ul>li { color: blue; }"

    def test_no_match(self):
        css = ".y { color: red; }"
        result = patch_css_text(css, CssChange(".x", "color", "blue"))
        assert not result.modified
        assert result.content == css

    def test_append_keeps_crlf(self):
        css = "h1 {\r\n  color: red;\r\n}\r\n.broken"
        result = mutate_css(css, CssChange("h1", "margin", "0"))
        assert result.content == "h1 {\r\n  color: red;\r\n  margin: 0;\r\n}\r\n.broken"
        assert "\n" not in result.content.replace("\r\n", "")
