"""Tests for session payload models."""

import pytest

from visual_inspector.errors import InvalidEnvelope
from visual_inspector.session import SelectedElement


class TestSelectedElement:
    def test_styles_are_read_only(self):
        element = SelectedElement(selector="h1", tag="h1", source_line=1, styles={"color": "red"})
        with pytest.raises(TypeError):
            element.styles["color"] = "blue"

    def test_styles_are_copied(self):
        styles = {"color": "red"}
        element = SelectedElement(selector="h1", tag="h1", source_line=1, styles=styles)

        styles["color"] = "blue"

        assert element.styles["color"] == "red"

    def test_payload_is_a_plain_dict(self):
        element = SelectedElement.from_payload(
            {"selector": ".a", "tag": "div", "line": 4, "styles": {"margin": "0"}}
        )
        payload = element.to_payload()
        payload["styles"]["margin"] = "1px"
        assert element.styles["margin"] == "0"

    def test_equal_selections(self):
        a = SelectedElement(selector="h1", tag="h1", source_line=1, styles={"color": "red"})
        b = SelectedElement(selector="h1", tag="h1", source_line=1, styles={"color": "red"})
        assert a == b

    def test_rejects_non_integer_line(self):
        with pytest.raises(InvalidEnvelope):
            SelectedElement.from_payload({"selector": "h1", "line": "3"})
