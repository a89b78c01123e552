import pytest

from bakehouse.templates.base import IdentityAdapter
from bakehouse.templates.model import TemplateModel


def test_explicit_entries_win_over_extractors(extractors, store, make_record):
    store.add_document(make_record("Stored"))
    model = TemplateModel({"published_posts": ["explicit"]}).bind(store, extractors, IdentityAdapter())

    assert model["published_posts"] == ["explicit"]


def test_missing_keys_are_extracted_lazily(extractors, store, make_record):
    model = TemplateModel().bind(store, extractors, IdentityAdapter())
    store.add_document(make_record("Added after binding"))

    assert [d.title for d in model["posts"]] == ["Added after binding"]
    assert "posts" in model
    assert "posts" not in list(model)


def test_unknown_keys(extractors, store):
    model = TemplateModel().bind(store, extractors, IdentityAdapter())

    assert model.get("nope", "default") == "default"
    assert "nope" not in model
    with pytest.raises(KeyError):
        model["nope"]


def test_unbound_model_is_a_plain_mapping():
    model = TemplateModel({"a": 1})
    model["b"] = 2
    del model["a"]

    assert dict(model) == {"b": 2}
    assert len(model) == 1
    with pytest.raises(KeyError):
        model["posts"]
