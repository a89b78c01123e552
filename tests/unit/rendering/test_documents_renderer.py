from datetime import datetime
from unittest.mock import MagicMock

import pytest

from bakehouse.exceptions import RenderingError
from bakehouse.rendering.renderer import Renderer
from bakehouse.rendering.tools import DocumentsRenderer


@pytest.fixture
def renderer():
    return MagicMock(spec=Renderer)


def _rendered_by_title(renderer):
    return {call.args[0].title: call.args[0] for call in renderer.render.call_args_list}


def _title(link):
    return link.title if link is not None else None


def test_navigation_links_neighbours(renderer, store, config, document_types, make_record):
    # ARRANGE
    for day in range(1, 5):
        store.add_document(make_record(f"D{day}", date=datetime(2024, 1, day)))

    # ACT
    count = DocumentsRenderer().render(renderer, store, config, document_types)

    # ASSERT
    assert count == 4
    docs = _rendered_by_title(renderer)
    assert (_title(docs["D4"].previous_content), _title(docs["D4"].next_content)) == ("D3", None)
    assert (_title(docs["D3"].previous_content), _title(docs["D3"].next_content)) == ("D2", "D4")
    assert (_title(docs["D2"].previous_content), _title(docs["D2"].next_content)) == ("D1", "D3")
    assert (_title(docs["D1"].previous_content), _title(docs["D1"].next_content)) == (None, "D2")


def test_navigation_projection_has_only_link_fields(renderer, store, config, document_types, make_record):
    store.add_document(make_record("Old", date=datetime(2024, 1, 1)))
    store.add_document(make_record("New", date=datetime(2024, 1, 2)))

    DocumentsRenderer().render(renderer, store, config, document_types)

    link = _rendered_by_title(renderer)["New"].previous_content
    assert link.model_dump() == {"uri": "post/old.html", "no_extension_uri": None, "title": "Old"}


def test_drafts_are_skipped_in_navigation(renderer, store, config, document_types, make_record):
    store.add_document(make_record("Older", date=datetime(2024, 1, 1)))
    store.add_document(make_record("Draft", status="draft", date=datetime(2024, 1, 2)))
    store.add_document(make_record("Newer", date=datetime(2024, 1, 3)))

    DocumentsRenderer().render(renderer, store, config, document_types)

    docs = _rendered_by_title(renderer)
    assert _title(docs["Newer"].previous_content) == "Older"
    assert _title(docs["Older"].next_content) == "Newer"
    assert _title(docs["Draft"].previous_content) == "Older"
    assert _title(docs["Draft"].next_content) == "Newer"


def test_navigation_stays_within_a_type(renderer, store, config, document_types, make_record):
    store.add_document(make_record("Post", date=datetime(2024, 1, 1)))
    store.add_document(make_record("Page", doc_type="page", date=datetime(2024, 1, 2)))

    DocumentsRenderer().render(renderer, store, config, document_types)

    docs = _rendered_by_title(renderer)
    assert docs["Post"].next_content is None
    assert docs["Page"].previous_content is None


def test_rendered_documents_are_marked(renderer, store, config, document_types, make_record):
    store.add_document(make_record("Once"))

    DocumentsRenderer().render(renderer, store, config, document_types)

    assert store.get_unrendered_content("post") == []
    assert DocumentsRenderer().render(renderer, store, config, document_types) == 0


def test_failures_are_aggregated_after_every_attempt(renderer, store, config, document_types, make_record):
    # ARRANGE
    store.add_document(make_record("A", date=datetime(2024, 1, 1)))
    store.add_document(make_record("B", date=datetime(2024, 1, 2)))
    renderer.render.side_effect = Exception("fake exception")

    # ACT
    with pytest.raises(RenderingError) as excinfo:
        DocumentsRenderer().render(renderer, store, config, document_types)

    # ASSERT
    assert str(excinfo.value) == "fake exception\nfake exception"
    assert renderer.render.call_count == 2
    assert excinfo.value.errors == ["fake exception", "fake exception"]
    assert excinfo.value.rendered_count == 0
    assert len(store.get_unrendered_content("post")) == 2


def test_partial_failure_still_marks_successes(renderer, store, config, document_types, make_record):
    store.add_document(make_record("Good", date=datetime(2024, 1, 1)))
    store.add_document(make_record("Bad", date=datetime(2024, 1, 2)))
    def render(doc):
        if doc.title == "Bad":
            raise ValueError

    renderer.render.side_effect = render

    with pytest.raises(RenderingError) as excinfo:
        DocumentsRenderer().render(renderer, store, config, document_types)

    assert excinfo.value.errors == ["ValueError"]
    assert excinfo.value.rendered_count == 1
    assert [doc.title for doc in store.get_unrendered_content("post")] == ["Bad"]


def test_disabled_document_rendering(renderer, store, config, document_types, make_record):
    store.add_document(make_record("Skipped"))
    config.render_documents = False

    assert DocumentsRenderer().render(renderer, store, config, document_types) == 0
    renderer.render.assert_not_called()
