"""Tests for canonical selector text."""

import re

import pytest

from visual_inspector.stylesheet import normalize, selector_pattern, selectors_match


class TestNormalize:
    def test_collapses_whitespace_and_combinators(self):
        assert normalize(".nav >a ,  .nav  li") == ".nav > a, .nav li"

    def test_strips_outer_whitespace(self):
        assert normalize("  h1\n\t") == "h1"

    @pytest.mark.parametrize(
        "selector",
        [".nav >a ,  .nav  li", "div\n>\np", "a[href='x  y'] > b", "  .btn.primary  "],
    )
    def test_idempotent(self, selector):
        once = normalize(selector)
        assert normalize(once) == once

    def test_quoted_strings_untouched(self):
        assert normalize('[title="a  >b"]') == '[title="a  >b"]'
        assert not selectors_match('[title="a>b"]', '[title="a > b"]')

    def test_case_sensitive(self):
        assert not selectors_match(".Btn", ".btn")

    def test_spacing_variants_match(self):
        assert selectors_match("ul>li", "ul > li")
        assert selectors_match("h1,h2", "h1 ,  h2")


class TestSelectorPattern:
    def test_matches_any_combinator_spacing(self):
        pattern = re.compile(selector_pattern("ul > li"))
        assert pattern.fullmatch("ul>li")
        assert pattern.fullmatch("ul  >\n li")

    def test_descendant_requires_whitespace(self):
        pattern = re.compile(selector_pattern("div p"))
        assert pattern.fullmatch("div\n  p")
        assert not pattern.fullmatch("divp")

    def test_escapes_special_characters(self):
        pattern = re.compile(selector_pattern(".a.b"))
        assert pattern.fullmatch(".a.b")
        assert not pattern.fullmatch(".aXb")


class TestAdjacentCombinators:
    def test_no_doubled_spaces(self):
        assert normalize("a>>b") == "a > > b"
        assert normalize("a , , b") == "a, , b"

    def test_still_idempotent(self):
        once = normalize("a>>b")
        assert normalize(once) == once

    def test_pattern_matches_unspaced_source(self):
        assert re.fullmatch(selector_pattern("a > > b"), "a>>b")
