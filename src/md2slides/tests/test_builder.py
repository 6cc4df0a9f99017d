"""Tests for md2slides.layout.builder — create and populate request batches."""

import pytest

from md2slides.core.requests import (
    CreateParagraphBulletsRequest,
    CreateSlideRequest,
    CreateTableRequest,
    InsertTextRequest,
    UpdateTextStyleRequest,
)
from md2slides.core.slides import (
    BodyBlock,
    ListMarker,
    SlideDefinition,
    StyleRun,
    TableModel,
    TextBlock,
    TextStyle,
)
from md2slides.errors import (
    LayoutResolutionError,
    MissingElementWarning,
    PreconditionError,
    StructuralError,
)
from md2slides.layout.builder import (
    SlideRequestBuilder,
    build_create_requests,
    build_populate_requests,
    compute_shallow_field_mask,
)
from md2slides.parser.extractor import extract_slides


def _placeholder(object_id, role, x=0, y=0):
    return {
        "objectId": object_id,
        "shape": {"placeholder": {"type": role}},
        "transform": {"translateX": x, "translateY": y},
    }


def _deck(layouts=("TITLE", "BLANK"), slides=()):
    return {
        "presentationId": "deck1",
        "layouts": [
            {"objectId": f"layout-{name}", "layoutProperties": {"name": name}}
            for name in layouts
        ],
        "slides": list(slides),
    }


def _page(object_id, elements, notes_id="notes-1"):
    page = {"objectId": object_id, "pageElements": elements}
    if notes_id:
        page["slideProperties"] = {
            "notesPage": {"notesProperties": {"speakerNotesObjectId": notes_id}},
        }
    return page


def _kinds(requests):
    return [type(r).__name__ for r in requests]


# ── Field masks ─────────────────────────────────────────────────────────

class TestFieldMask:
    def test_model_lists_set_fields_in_declaration_order(self):
        style = TextStyle(font_family="Arial", bold=True)
        assert compute_shallow_field_mask(style) == ["bold", "fontFamily"]

    def test_model_excludes_only_unset(self):
        style = TextStyle(bold=False, italic=None, font_family="")
        assert compute_shallow_field_mask(style) == ["bold", "italic", "fontFamily"]

    def test_empty_model(self):
        assert compute_shallow_field_mask(TextStyle()) == []

    def test_mapping_keeps_falsy_and_null_values(self):
        assert compute_shallow_field_mask({"a": None, "b": False, "c": 0, "d": ""}) == [
            "a", "b", "c", "d",
        ]

    def test_mapping_keeps_insertion_order(self):
        assert compute_shallow_field_mask({"zeta": 1, "alpha": 2}) == ["zeta", "alpha"]

    def test_idempotent(self):
        style = TextStyle(italic=True, link=None)
        assert compute_shallow_field_mask(style) == compute_shallow_field_mask(style)

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            compute_shallow_field_mask(["bold"])


# ── Pass 1: slide creation ──────────────────────────────────────────────

class TestCreateSlide:
    def test_create_request(self):
        slide = SlideDefinition(title=TextBlock(raw_text="Hi"))
        requests = SlideRequestBuilder("TITLE", _deck(), slide).append_create_slide_request([])
        assert len(requests) == 1
        req = requests[0]
        assert isinstance(req, CreateSlideRequest)
        assert req.layout_id == "layout-TITLE"
        assert req.object_id == slide.object_id

    def test_fresh_id_each_time(self):
        slide = SlideDefinition(object_id="old")
        SlideRequestBuilder("BLANK", _deck(), slide).append_create_slide_request([])
        assert slide.object_id != "old"

    def test_missing_layout_lists_available(self):
        slide = SlideDefinition(custom_layout="Missing")
        builder = SlideRequestBuilder(slide.custom_layout, _deck(["TITLE", "BLANK"]), slide)
        with pytest.raises(LayoutResolutionError, match="TITLE, BLANK") as exc:
            builder.append_create_slide_request([])
        assert exc.value.layout_name == "Missing"
        assert exc.value.available == ["TITLE", "BLANK"]
        assert 'Unable to find layout "Missing"' in str(exc.value)

    def test_no_layouts(self):
        builder = SlideRequestBuilder("TITLE", _deck(layouts=()), SlideDefinition())
        with pytest.raises(LayoutResolutionError, match="none"):
            builder.append_create_slide_request([])


# ── Pass 2: content ─────────────────────────────────────────────────────

class TestPopulate:
    def test_requires_created_slide(self):
        builder = SlideRequestBuilder("TITLE", _deck(), SlideDefinition(title=TextBlock(raw_text="x")))
        with pytest.raises(PreconditionError):
            builder.append_content_requests([])

    def test_title_subtitle_bodies_notes_order(self):
        body = TextBlock(
            raw_text="a\nb\nc\n",
            runs=[StyleRun(start=0, end=1, style=TextStyle(bold=True))],
            list_markers=[
                ListMarker(start=0, end=2, type="unordered"),
                ListMarker(start=4, end=6, type="ordered"),
            ],
        )
        slide = SlideDefinition(
            title=TextBlock(raw_text="Title"),
            subtitle=TextBlock(raw_text="Sub"),
            bodies=[BodyBlock(text=body)],
            notes="Say this\n",
            object_id="s1",
        )
        deck = _deck(slides=[_page("s1", [
            _placeholder("body", "BODY"),
            _placeholder("sub", "SUBTITLE"),
            _placeholder("title", "TITLE"),
        ])])
        requests = SlideRequestBuilder("TITLE", deck, slide).append_content_requests([])
        assert _kinds(requests) == [
            "InsertTextRequest",
            "InsertTextRequest",
            "InsertTextRequest",
            "UpdateTextStyleRequest",
            "CreateParagraphBulletsRequest",
            "CreateParagraphBulletsRequest",
            "InsertTextRequest",
        ]
        assert [r.object_id for r in requests] == [
            "title", "sub", "body", "body", "body", "body", "notes-1",
        ]
        style_req = requests[3]
        assert style_req.fields == ["bold"]
        assert (style_req.start_index, style_req.end_index) == (0, 1)

    def test_bullets_applied_in_descending_start_order(self):
        markers = [
            ListMarker(start=0, end=4, type="unordered"),
            ListMarker(start=10, end=14, type="ordered"),
            ListMarker(start=5, end=9, type="unordered"),
        ]
        slide = SlideDefinition(
            bodies=[BodyBlock(text=TextBlock(raw_text="x" * 14, list_markers=markers))],
            object_id="s1",
        )
        deck = _deck(slides=[_page("s1", [_placeholder("body", "BODY")])])
        requests = SlideRequestBuilder("TITLE", deck, slide).append_content_requests([])
        bullets = [r for r in requests if isinstance(r, CreateParagraphBulletsRequest)]
        assert [b.start_index for b in bullets] == [10, 5, 0]
        assert bullets[0].bullet_preset == "NUMBERED_DIGIT_ALPHA_ROMAN"
        assert bullets[1].bullet_preset == "BULLET_DISC_CIRCLE_SQUARE"

    def test_centered_title_fallback(self):
        slide = SlideDefinition(title=TextBlock(raw_text="Big"), object_id="s1")
        deck = _deck(slides=[_page("s1", [_placeholder("ct", "CENTERED_TITLE")])])
        requests = SlideRequestBuilder("TITLE", deck, slide).append_content_requests([])
        assert [r.object_id for r in requests] == ["ct"]

    def test_empty_mask_suppressed(self):
        text = TextBlock(raw_text="plain", runs=[StyleRun(start=0, end=5)])
        slide = SlideDefinition(bodies=[BodyBlock(text=text)], object_id="s1")
        deck = _deck(slides=[_page("s1", [_placeholder("body", "BODY")])])
        requests = SlideRequestBuilder("TITLE", deck, slide).append_content_requests([])
        assert not any(isinstance(r, UpdateTextStyleRequest) for r in requests)

    def test_empty_text_emits_nothing(self):
        slide = SlideDefinition(title=TextBlock(raw_text=""), object_id="s1")
        deck = _deck(slides=[_page("s1", [_placeholder("title", "TITLE")])])
        assert SlideRequestBuilder("TITLE", deck, slide).append_content_requests([]) == []

    def test_bodies_follow_placeholder_position(self):
        slide = SlideDefinition(
            bodies=[BodyBlock(text=TextBlock(raw_text="L")), BodyBlock(text=TextBlock(raw_text="R"))],
            object_id="s1",
        )
        deck = _deck(slides=[_page("s1", [
            _placeholder("right", "BODY", x=400),
            _placeholder("left", "BODY", x=10),
        ])])
        requests = SlideRequestBuilder("TITLE_AND_TWO_COLUMNS", deck, slide).append_content_requests([])
        assert [(r.object_id, r.text) for r in requests] == [("left", "L"), ("right", "R")]

    def test_extra_bodies_warn_and_drop(self):
        slide = SlideDefinition(
            bodies=[BodyBlock(text=TextBlock(raw_text="one")), BodyBlock(text=TextBlock(raw_text="two"))],
            object_id="s1",
        )
        deck = _deck(slides=[_page("s1", [_placeholder("body", "BODY")])])
        with pytest.warns(MissingElementWarning):
            requests = SlideRequestBuilder("TITLE_AND_BODY", deck, slide).append_content_requests([])
        assert [r.text for r in requests] == ["one"]

    def test_missing_subtitle_warns(self):
        slide = SlideDefinition(subtitle=TextBlock(raw_text="Sub"), object_id="s1")
        deck = _deck(slides=[_page("s1", [])])
        with pytest.warns(MissingElementWarning, match="SUBTITLE"):
            requests = SlideRequestBuilder("BLANK", deck, slide).append_content_requests([])
        assert requests == []

    def test_missing_notes_shape_warns(self):
        slide = SlideDefinition(notes="hello", object_id="s1")
        deck = _deck(slides=[_page("s1", [], notes_id=None)])
        with pytest.warns(MissingElementWarning):
            assert SlideRequestBuilder("BLANK", deck, slide).append_content_requests([]) == []

    def test_unknown_slide(self):
        slide = SlideDefinition(title=TextBlock(raw_text="x"), object_id="ghost")
        with pytest.raises(PreconditionError):
            SlideRequestBuilder("TITLE", _deck(), slide).append_content_requests([])


# ── Tables ──────────────────────────────────────────────────────────────

class TestTables:
    def _table(self):
        table = TableModel()
        table.add_row([
            TextBlock(raw_text="A", runs=[StyleRun(start=0, end=1, style=TextStyle(bold=True))]),
            TextBlock(raw_text="B"),
        ])
        table.add_row([TextBlock(raw_text="1"), TextBlock(raw_text="")])
        return table

    def test_table_requests(self):
        slide = SlideDefinition(tables=[self._table()], object_id="s1")
        deck = _deck(slides=[_page("s1", [])])
        requests = SlideRequestBuilder("BLANK", deck, slide).append_content_requests([])

        create = requests[0]
        assert isinstance(create, CreateTableRequest)
        assert (create.rows, create.columns) == (2, 2)
        assert create.page_object_id == "s1"

        inserts = [r for r in requests if isinstance(r, InsertTextRequest)]
        assert [(r.cell_location.row_index, r.cell_location.column_index) for r in inserts] == [
            (0, 0), (0, 1), (1, 0),
        ]
        assert all(r.object_id == create.object_id for r in requests[1:])
        style = next(r for r in requests if isinstance(r, UpdateTextStyleRequest))
        assert style.cell_location.to_api() == {"rowIndex": 0, "columnIndex": 0}

    def test_multiple_tables_rejected(self):
        slide = SlideDefinition(tables=[self._table(), self._table()], object_id="s1")
        deck = _deck(slides=[_page("s1", [])])
        with pytest.raises(StructuralError, match="Multiple tables per slide are not supported."):
            SlideRequestBuilder("BLANK", deck, slide).append_content_requests([])


# ── Whole deck ──────────────────────────────────────────────────────────

class TestBuildDeck:
    LAYOUTS = ("TITLE", "SECTION_HEADER", "TITLE_AND_BODY", "BLANK")

    def test_two_pass_generation(self):
        slides = extract_slides(
            "# Hello\n## World\n\n---\n\n# Agenda\n\n* one\n* two\n\n<!-- notes -->"
        )
        deck = _deck(layouts=self.LAYOUTS)

        create = build_create_requests(deck, slides)
        assert [r.layout_id for r in create] == ["layout-TITLE", "layout-TITLE_AND_BODY"]
        assert [r.object_id for r in create] == [s.object_id for s in slides]

        reloaded = _deck(layouts=self.LAYOUTS, slides=[
            _page(slides[0].object_id, [
                _placeholder("t0", "CENTERED_TITLE"), _placeholder("s0", "SUBTITLE"),
            ], notes_id="n0"),
            _page(slides[1].object_id, [
                _placeholder("t1", "TITLE"), _placeholder("b1", "BODY"),
            ], notes_id="n1"),
        ])
        populate = build_populate_requests(reloaded, slides)
        inserts = [(r.object_id, r.text) for r in populate if isinstance(r, InsertTextRequest)]
        assert inserts == [
            ("t0", "Hello"),
            ("s0", "World"),
            ("t1", "Agenda"),
            ("b1", "one\ntwo\n"),
            ("n1", "notes\n"),
        ]
        bullets = [r for r in populate if isinstance(r, CreateParagraphBulletsRequest)]
        assert [(b.start_index, b.end_index) for b in bullets] == [(0, 8)]

    def test_custom_layout_missing_from_deck_uses_shape(self):
        slides = extract_slides("{layout=Missing}\n\n# Title")
        create = build_create_requests(_deck(layouts=self.LAYOUTS), slides)
        assert create[0].layout_id == "layout-SECTION_HEADER"
