"""
Unit tests for document edits.
"""

from __future__ import annotations

from slidewright.deck.editing import (
    NEW_SLIDE_CONTENT,
    apply_slide_edit,
    attach_generated_image,
    attach_uploaded_image,
    content_to_text,
    detach_image,
    fallback_image_prompt,
    insert_slide,
    new_slide,
    normalize_content_text,
    pdf_filename,
    replace_slide,
    slide_png_filename,
    slides_needing_images,
)
from slidewright.deck.models import Presentation, Slide


def _deck(*slides: Slide) -> Presentation:
    return Presentation(id="p1", title="Deck", slides=list(slides))


class TestNormalization:

    def test_blank_lines_dropped(self):
        assert normalize_content_text("first\n\n   \nsecond\n") == ["first", "second"]

    def test_lines_kept_as_typed(self):
        assert normalize_content_text("  indented  \nnext") == ["  indented  ", "next"]

    def test_never_empty_bullets(self):
        for text in ["", "\n", " \n\t\n", "a\n\nb", "\n\n\nc"]:
            assert all(line.strip() for line in normalize_content_text(text))

    def test_content_to_text(self):
        assert content_to_text(["a", "b"]) == "a\nb"
        assert normalize_content_text(content_to_text(["a", "b"])) == ["a", "b"]


class TestSlideEdit:

    def test_apply_edit(self):
        slide = Slide(id="s1", title="Old", content=["x"], subtitle="old sub")
        edited = apply_slide_edit(slide, "New", "one\n\ntwo", "")
        assert edited.title == "New"
        assert edited.content == ["one", "two"]
        assert edited.subtitle is None
        assert slide.title == "Old"
        assert slide.content == ["x"]

    def test_apply_edit_keeps_other_fields(self):
        slide = Slide(id="s1", title="T", layout="split", notes="n", image_url="u")
        edited = apply_slide_edit(slide, "T2", "a", "Sub")
        assert edited.subtitle == "Sub"
        assert (edited.id, edited.layout, edited.notes, edited.image_url) == ("s1", "split", "n", "u")


class TestInsertSlide:

    def test_new_slide_defaults(self):
        slide = new_slide("fixed-id")
        assert slide.id == "fixed-id"
        assert slide.title == "New Slide"
        assert slide.content == [NEW_SLIDE_CONTENT]
        assert slide.layout == "content"
        assert slide.notes == "Custom added slide."

    def test_new_slide_title_and_layout(self):
        slide = new_slide("n", title="Agenda", layout="split")
        assert (slide.title, slide.layout) == ("Agenda", "split")
        assert slide.content == [NEW_SLIDE_CONTENT]

    def test_new_slide_empty_title_falls_back(self):
        assert new_slide("n", title="").title == "New Slide"
        assert new_slide("n", title="", layout="quote").layout == "quote"

    def test_new_slide_unique_ids(self):
        assert new_slide().id != new_slide().id

    def test_insert_after_current(self):
        deck = _deck(Slide(id="a", title="A"), Slide(id="b", title="B"))
        updated = insert_slide(deck, 0, new_slide("n"))
        assert [s.id for s in updated.slides] == ["a", "n", "b"]
        assert [s.id for s in deck.slides] == ["a", "b"]

    def test_insert_at_end_and_into_empty(self):
        deck = _deck(Slide(id="a", title="A"))
        assert [s.id for s in insert_slide(deck, 0, new_slide("n")).slides] == ["a", "n"]
        assert [s.id for s in insert_slide(_deck(), 0, new_slide("n")).slides] == ["n"]

    def test_replace_slide(self):
        deck = _deck(Slide(id="a", title="A"), Slide(id="b", title="B"))
        updated = replace_slide(deck, Slide(id="b", title="B2"))
        assert [s.title for s in updated.slides] == ["A", "B2"]


class TestImages:

    def test_fallback_prompt(self):
        slide = Slide(id="s", title="Solar", content=["cheap", "clean"])
        assert fallback_image_prompt(slide) == "A professional visual representation of: Solar. cheap clean"

    def test_detach(self):
        slide = Slide(id="s", title="T", layout="image-left", image_url="u", image_prompt="p")
        detached = detach_image(slide)
        assert detached.image_url is None
        assert detached.image_prompt is None
        assert detached.layout == "content"

    def test_attach_generated(self):
        slide = Slide(id="s", title="Solar", content=["cheap"], layout="split")
        attached = attach_generated_image(slide, "data:image/png;base64,AAAA")
        assert attached.layout == "image-right"
        assert attached.image_url == "data:image/png;base64,AAAA"
        assert attached.image_prompt == fallback_image_prompt(slide)

    def test_attach_generated_keeps_prompt(self):
        slide = Slide(id="s", title="T", image_prompt="a lighthouse")
        assert attach_generated_image(slide, "u").image_prompt == "a lighthouse"

    def test_upload_keeps_image_layout(self):
        slide = Slide(id="s", title="T", layout="image-left")
        assert attach_uploaded_image(slide, "u").layout == "image-left"

    def test_upload_switches_other_layouts(self):
        for layout in ("content", "title", "bogus"):
            slide = Slide(id="s", title="T", layout=layout)
            assert attach_uploaded_image(slide, "u").layout == "image-right"

    def test_slides_needing_images(self):
        deck = _deck(
            Slide(id="a", title="A", layout="image-left", image_prompt="p"),
            Slide(id="b", title="B", layout="image-right"),
            Slide(id="c", title="C", layout="content", image_prompt="p"),
            Slide(id="d", title="D", layout="image-right", image_prompt="q"),
        )
        assert [s.id for s in slides_needing_images(deck)] == ["a", "d"]


class TestExportNames:

    def test_pdf_filename(self):
        assert pdf_filename("Solar Energy  in 2030") == "Solar_Energy_in_2030_Presentation.pdf"
        assert pdf_filename("Tab\tTitle") == "Tab_Title_Presentation.pdf"

    def test_png_names_one_based(self):
        assert slide_png_filename(0) == "Slide_1.png"
        assert slide_png_filename(9) == "Slide_10.png"
