"""
Unit tests for the deck document models and configuration.
"""

from __future__ import annotations

import pytest

from slidewright.deck.config import (
    DeckConfig,
    ExportConfig,
    RenderConfig,
    RoleSizes,
    VariantSizeTable,
    get_deck_config,
    load_deck_config,
    set_deck_config,
)
from slidewright.deck.models import (
    DEFAULT_PALETTE,
    PALETTES,
    LayoutTag,
    Presentation,
    PresentationStyle,
    Slide,
    get_palette,
)


class TestLayoutTag:

    def test_parse(self):
        assert LayoutTag.parse("image-left") == LayoutTag.IMAGE_LEFT
        assert LayoutTag.parse(" Quote ") == LayoutTag.QUOTE
        assert LayoutTag.parse("bogus") is None
        assert LayoutTag.parse(None) is None

    def test_is_image(self):
        assert LayoutTag.IMAGE_RIGHT.is_image
        assert not LayoutTag.SPLIT.is_image


class TestSlide:

    def test_camel_case_round_trip(self):
        d = {
            "id": "s1",
            "title": "T",
            "content": ["a", "b"],
            "layout": "image-left",
            "imageUrl": "u",
            "imagePrompt": "p",
            "notes": "n",
        }
        slide = Slide.from_dict(d)
        assert slide.image_url == "u"
        assert slide.image_prompt == "p"
        assert slide.to_dict() == d

    def test_snake_case_accepted(self):
        slide = Slide.from_dict({"id": "s", "title": "T", "image_url": "u"})
        assert slide.image_url == "u"

    def test_unknown_layout_preserved(self):
        slide = Slide.from_dict({"id": "s", "title": "T", "layout": "hologram"})
        assert slide.layout == "hologram"
        assert slide.layout_tag is None
        assert slide.to_dict()["layout"] == "hologram"

    def test_defaults(self):
        slide = Slide.from_dict({"title": "T"})
        assert slide.id
        assert slide.layout == "content"
        assert slide.content == []

    def test_string_content_split(self):
        assert Slide.from_dict({"id": "s", "title": "T", "content": "a\nb"}).content == ["a", "b"]


class TestPresentation:

    def test_defaults(self):
        p = Presentation.from_dict({"slides": []})
        assert p.title == "Untitled Presentation"
        assert p.id
        assert p.theme == PresentationStyle.PROFESSIONAL
        assert p.palette == DEFAULT_PALETTE

    def test_palette_by_name(self):
        p = Presentation.from_dict({"slides": [], "palette": "Forest"})
        assert p.palette.name == "Forest"
        assert p.palette.accent == "#10b981"

    def test_palette_dict(self):
        p = Presentation.from_dict({"slides": [], "palette": PALETTES[3].to_dict()})
        assert p.palette == PALETTES[3]

    def test_theme_case_insensitive(self):
        assert Presentation.from_dict({"slides": [], "theme": "futuristic"}).theme == PresentationStyle.FUTURISTIC

    def test_sources_need_uri(self):
        p = Presentation.from_dict({
            "slides": [],
            "sources": [{"uri": "https://a.example"}, {"title": "No link"}],
        })
        assert len(p.sources) == 1
        assert p.sources[0].title == "Source"

    def test_round_trip(self):
        d = {
            "id": "p1",
            "title": "Solar",
            "slides": [{"id": "s1", "title": "Intro", "content": ["x"], "layout": "title"}],
            "theme": "Creative",
            "palette": PALETTES[1].to_dict(),
            "sources": [{"title": "Ref", "uri": "https://a.example"}],
        }
        assert Presentation.from_dict(d).to_dict() == d

    def test_default_palette_not_shared(self):
        a = Presentation(id="a", title="A")
        a.palette.primary = "#000000"
        assert Presentation(id="b", title="B").palette.primary == DEFAULT_PALETTE.primary

    def test_invalid_document(self):
        with pytest.raises(ValueError):
            Presentation.from_dict(["not", "an", "object"])
        with pytest.raises(ValueError):
            Presentation.from_dict({"slides": "nope"})

    def test_sources_must_be_objects(self):
        with pytest.raises(ValueError):
            Presentation.from_dict({"slides": [], "sources": ["https://x.org"]})
        with pytest.raises(ValueError):
            Presentation.from_dict({"slides": [], "sources": {"uri": "https://x.org"}})

    def test_sources_without_uri_skipped(self):
        p = Presentation.from_dict({"slides": [], "sources": [{"title": "t"}, {"uri": "https://x.org"}]})
        assert [s.uri for s in p.sources] == ["https://x.org"]


class TestPalettes:

    def test_five_builtins(self):
        assert [p.name for p in PALETTES] == ["Deep Sea", "Sunset", "Forest", "Midnight", "Soft Rose"]

    def test_lookup(self):
        assert get_palette("soft rose").primary == "#881337"
        assert get_palette("Neon") is None


class TestDeckConfig:

    def test_round_trip(self):
        config = DeckConfig(
            sizes=VariantSizeTable(split_body=RoleSizes(20, 10, 8, 6)),
            render=RenderConfig(math="plain", thumbnails=False),
            presentation_path="deck.json",
        )
        restored = DeckConfig.from_dict(config.to_dict())
        assert restored.to_dict() == config.to_dict()
        assert restored.sizes.split_body == RoleSizes(20, 10, 8, 6)

    def test_default_sizes(self):
        sizes = VariantSizeTable()
        assert sizes.title_title.to_list() == [64, 32, 24, 12]
        assert sizes.content_body.to_list() == [26, 14, 11, 9]
        assert sizes.image_header.pick_class(False) == "text-3xl"
        assert sizes.image_header.pick_class(True) == "text-sm"

    def test_invalid_math_renderer(self):
        with pytest.raises(ValueError):
            RenderConfig(math="mathjax")

    def test_invalid_orientation(self):
        with pytest.raises(ValueError):
            ExportConfig(orientation="diagonal")

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "deck.yaml"
        path.write_text(
            "sizing:\n"
            "  easy_threshold: 200\n"
            "sizes:\n"
            "  content:\n"
            "    body: [30, 15, 12, 10]\n"
            "render:\n"
            "  math: plain\n",
            encoding="utf-8",
        )
        config = load_deck_config(path)
        assert config.sizing.easy_threshold == 200
        assert config.sizing.hard_limit == 1200
        assert config.sizes.content_body == RoleSizes(30, 15, 12, 10)
        assert config.sizes.title_title == RoleSizes(64, 32, 24, 12)
        assert config.render.math == "plain"

    def test_load_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_deck_config(path).to_dict() == DeckConfig().to_dict()

    def test_load_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_deck_config(path)

    def test_global_singleton(self):
        previous = get_deck_config()
        try:
            custom = DeckConfig(render=RenderConfig(math="plain"))
            set_deck_config(custom)
            assert get_deck_config() is custom
        finally:
            set_deck_config(previous)
