"""
Article store behaviour: create / list / get / update / delete.
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from newsportal.modules.articles import database as articles_db


@pytest.fixture
def ticking_clock(monkeypatch):
    """Each call to utc_now() is one minute later than the previous one."""
    state = {"now": datetime(2025, 11, 27, 10, 0, tzinfo=timezone.utc)}

    def _fake_now():
        state["now"] += timedelta(minutes=1)
        return state["now"]

    monkeypatch.setattr(articles_db, "utc_now", _fake_now)
    return state


# ---------------------------------------------------------------------------
# create / get_by_id
# ---------------------------------------------------------------------------

def test_create_example_round_trip(store):
    """create({title:"A", body:"B", author:"C"}) -> id 1 with empty optionals."""
    article_id = store.create({"title": "A", "body": "B", "author": "C"})
    assert article_id == 1

    article = store.get_by_id(1)
    assert article["id"] == 1
    assert article["title"] == "A"
    assert article["subtitle"] == ""
    assert article["body"] == "B"
    assert article["image_url"] == ""
    assert article["video_url"] == ""
    assert article["author"] == "C"
    assert article["published_at"]


def test_create_returns_fresh_ids_and_preserves_fields(store):
    fields = {
        "title": "Flood warning",
        "subtitle": "River rises",
        "body": "First line\nSecond line\n\nNew paragraph",
        "image_url": "https://example.com/river.jpg",
        "video_url": "https://youtu.be/dQw4w9WgXcQ",
        "author": "Ana",
    }
    first = store.create(fields)
    second = store.create(fields)
    assert first != second

    article = store.get_by_id(second)
    for key, value in fields.items():
        assert article[key] == value


def test_published_at_is_now(store, ticking_clock):
    article_id = store.create({"title": "A", "body": "B", "author": "C"})
    article = store.get_by_id(article_id)
    assert article["published_at"] == ticking_clock["now"].strftime("%Y-%m-%d %H:%M:%S")


@pytest.mark.parametrize("missing", ["title", "body", "author"])
def test_create_missing_required_field_adds_no_row(store, missing):
    fields = {"title": "A", "body": "B", "author": "C"}
    fields[missing] = "   "
    before = store.count()

    with pytest.raises(ValueError):
        store.create(fields)

    assert store.count() == before


def test_get_unknown_id_returns_none(store):
    assert store.get_by_id(999) is None


# ---------------------------------------------------------------------------
# list_latest
# ---------------------------------------------------------------------------

def test_list_latest_is_bounded_and_sorted(store, ticking_clock):
    for i in range(8):
        store.create({"title": f"Article {i}", "body": "B", "author": "C"})

    latest = store.list_latest(5)
    assert len(latest) == 5
    stamps = [a["published_at"] for a in latest]
    assert stamps == sorted(stamps, reverse=True)
    assert latest[0]["title"] == "Article 7"


def test_list_latest_default_limit_is_six(store):
    for i in range(9):
        store.create({"title": f"Article {i}", "body": "B", "author": "C"})
    assert len(store.list_latest()) == 6


def test_list_latest_none_returns_everything(store):
    for i in range(9):
        store.create({"title": f"Article {i}", "body": "B", "author": "C"})
    assert len(store.list_latest(None)) == 9


def test_list_latest_same_second_newest_id_first(store):
    """Articles created within the same second still list newest first."""
    ids = [store.create({"title": str(i), "body": "B", "author": "C"}) for i in range(3)]
    assert [a["id"] for a in store.list_latest(3)] == sorted(ids, reverse=True)


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------

def test_update_overwrites_fields_but_not_published_at(store, ticking_clock):
    article_id = store.create({
        "title": "Old", "subtitle": "Sub", "body": "Old body",
        "image_url": "/uploads/x.png", "author": "C",
    })
    published_at = store.get_by_id(article_id)["published_at"]

    changes = store.update(article_id, {"title": "New", "body": "New body", "author": "D"})
    assert changes == 1

    article = store.get_by_id(article_id)
    assert article["title"] == "New"
    assert article["body"] == "New body"
    assert article["author"] == "D"
    # no partial patching: omitted optionals are overwritten with ''
    assert article["subtitle"] == ""
    assert article["image_url"] == ""
    assert article["published_at"] == published_at


def test_update_unknown_id_reports_zero_and_creates_nothing(store):
    before = store.count()
    changes = store.update(404, {"title": "A", "body": "B", "author": "C"})
    assert changes == 0
    assert store.count() == before
    assert store.get_by_id(404) is None


def test_update_rejects_blank_required_fields(store):
    article_id = store.create({"title": "A", "body": "B", "author": "C"})
    with pytest.raises(ValueError):
        store.update(article_id, {"title": "", "body": "B", "author": "C"})
    assert store.get_by_id(article_id)["title"] == "A"


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------

def test_delete_is_idempotent(store):
    article_id = store.create({"title": "A", "body": "B", "author": "C"})

    assert store.delete(article_id) == 1
    assert store.delete(article_id) == 0
    assert store.get_by_id(article_id) is None


def test_ids_are_not_reused_after_delete(store):
    first = store.create({"title": "A", "body": "B", "author": "C"})
    store.delete(first)
    second = store.create({"title": "A", "body": "B", "author": "C"})
    assert second != first


def test_mutations_are_logged(store, caplog):
    caplog.set_level(logging.INFO, logger="newsportal")
    article_id = store.create({"title": "A", "body": "B", "author": "C"})
    store.delete(article_id)

    messages = [(r.name, r.getMessage()) for r in caplog.records]
    assert any(name == "newsportal.articles" and f"Created article {article_id}" in msg
               for name, msg in messages)
    assert any(name == "newsportal.articles" and f"Deleted article {article_id}" in msg
               for name, msg in messages)


def test_ids_beyond_sqlite_range_are_absent(store):
    huge = 10 ** 20
    store.create({"title": "A", "body": "B", "author": "C"})

    assert store.get_by_id(huge) is None
    assert store.get_by_id(-huge) is None
    assert store.update(huge, {"title": "A", "body": "B", "author": "C"}) == 0
    assert store.delete(huge) == 0
    assert store.count() == 1


def test_list_latest_accepts_oversized_limit(store):
    store.create({"title": "A", "body": "B", "author": "C"})
    assert len(store.list_latest(10 ** 20)) == 1
