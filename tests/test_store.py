"""
Store tests: the persistence operations shared by the pages and the API.
"""

import pytest

from postbox.core import db, newsletter_subscribers, NotFoundError, ValidationError
from postbox.core.models import Subscriber


def association_count(**filters):
    query = db.select(db.func.count()).select_from(newsletter_subscribers)
    for column, value in filters.items():
        query = query.where(newsletter_subscribers.c[column] == value)
    return db.session.execute(query).scalar()


# ---------------------------------------------------------------------------
# Newsletters
# ---------------------------------------------------------------------------

def test_create_and_list_newsletters_in_insertion_order(store):
    first = store.create_newsletter("Weekly")
    second = store.create_newsletter("Monthly")

    names = [n.name for n in store.list_newsletters()]
    assert names == ["Weekly", "Monthly"]
    assert first.id < second.id
    assert first.created_at is not None


@pytest.mark.parametrize("name", [None, "", "   "])
def test_create_newsletter_requires_name(store, name):
    with pytest.raises(ValidationError) as exc:
        store.create_newsletter(name)
    assert exc.value.status_code == 400
    assert store.list_newsletters() == []


def test_get_missing_newsletter_raises_not_found(store):
    with pytest.raises(NotFoundError) as exc:
        store.get_newsletter(999)
    assert exc.value.message == "Newsletter not found"


def test_delete_newsletter_keeps_subscribers_and_clears_associations(store):
    weekly = store.create_newsletter("Weekly")
    monthly = store.create_newsletter("Monthly")
    for i in range(3):
        store.add_subscriber_to_newsletter(weekly.id, f"Reader {i}", f"reader{i}@example.com")
    store.add_subscriber_to_newsletter(monthly.id, "Reader 0", "reader0@example.com")
    weekly_id = weekly.id

    store.delete_newsletter(weekly_id)

    assert len(store.list_subscribers()) == 3
    assert association_count(newsletter_id=weekly_id) == 0
    assert association_count(newsletter_id=monthly.id) == 1
    with pytest.raises(NotFoundError):
        store.get_newsletter(weekly_id)


def test_delete_missing_newsletter_raises_not_found(store):
    with pytest.raises(NotFoundError):
        store.delete_newsletter(42)


# ---------------------------------------------------------------------------
# Subscribers
# ---------------------------------------------------------------------------

def test_create_subscriber_rejects_duplicate_email(store):
    store.create_subscriber("Ada", "ada@example.com")

    with pytest.raises(ValidationError) as exc:
        store.create_subscriber("Ada Again", "ada@example.com")

    assert exc.value.message == "Subscriber email must be unique"
    assert len(store.list_subscribers()) == 1


@pytest.mark.parametrize("email", [None, ""])
def test_create_subscriber_requires_email(store, email):
    with pytest.raises(ValidationError):
        store.create_subscriber("Ada", email)


def test_find_or_create_reuses_existing_email_and_ignores_name(store):
    first, created = store.find_or_create_subscriber("Ada", "ada@example.com")
    again, created_again = store.find_or_create_subscriber("Ada2", "ada@example.com")

    assert created is True
    assert created_again is False
    assert again.id == first.id
    assert again.name == "Ada"


def test_find_or_create_recovers_when_insert_loses_race(store, monkeypatch):
    existing = store.create_subscriber("Ada", "ada@example.com")
    lookups = []
    real_lookup = store.find_subscriber_by_email

    def stale_then_real(email):
        # First lookup misses, as if another request inserted in between
        lookups.append(email)
        if len(lookups) == 1:
            return None
        return real_lookup(email)

    monkeypatch.setattr(store, "find_subscriber_by_email", stale_then_real)

    subscriber, created = store.find_or_create_subscriber("Ada2", "ada@example.com")

    assert created is False
    assert subscriber.id == existing.id
    assert db.session.query(Subscriber).count() == 1


def test_add_subscriber_twice_creates_one_row_and_one_association(store):
    newsletter = store.create_newsletter("Weekly")

    store.add_subscriber_to_newsletter(newsletter.id, "Ada", "ada@example.com")
    store.add_subscriber_to_newsletter(newsletter.id, "Ada2", "ada@example.com")

    subscribers = store.newsletter_subscribers(newsletter.id)
    assert [s.name for s in subscribers] == ["Ada"]
    assert association_count(newsletter_id=newsletter.id) == 1


def test_add_subscriber_to_missing_newsletter_still_creates_subscriber(store):
    with pytest.raises(NotFoundError):
        store.add_subscriber_to_newsletter(999, "Ada", "ada@example.com")

    assert [s.email for s in store.list_subscribers()] == ["ada@example.com"]
    assert association_count() == 0


def test_delete_subscriber_keeps_newsletters_and_clears_associations(store):
    letters = [store.create_newsletter(name) for name in ("Weekly", "Monthly", "Daily")]
    subscriber = None
    for letter in letters:
        subscriber = store.add_subscriber_to_newsletter(letter.id, "Ada", "ada@example.com")
    subscriber_id = subscriber.id

    store.delete_subscriber(subscriber_id)

    assert len(store.list_newsletters()) == 3
    assert association_count(subscriber_id=subscriber_id) == 0
    for letter in letters:
        assert store.newsletter_subscribers(letter.id) == []


def test_subscriber_newsletters(store):
    weekly = store.create_newsletter("Weekly")
    store.create_newsletter("Monthly")
    ada = store.add_subscriber_to_newsletter(weekly.id, "Ada", "ada@example.com")

    assert [n.name for n in store.subscriber_newsletters(ada.id)] == ["Weekly"]

    with pytest.raises(NotFoundError) as exc:
        store.subscriber_newsletters(999)
    assert exc.value.message == "Subscriber not found"


# ---------------------------------------------------------------------------
# Input types
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("newsletter_id", ["abc", "1.5", None, True])
def test_unparseable_newsletter_id_is_not_found(store, newsletter_id):
    store.create_newsletter("Weekly")

    with pytest.raises(NotFoundError):
        store.get_newsletter(newsletter_id)


def test_numeric_string_id_resolves(store):
    newsletter = store.create_newsletter("Weekly")

    assert store.get_newsletter(str(newsletter.id)).id == newsletter.id


@pytest.mark.parametrize("name", [["Weekly"], {"a": 1}, False, 1.5])
def test_non_text_name_is_rejected(store, name):
    with pytest.raises(ValidationError) as exc:
        store.create_newsletter(name)
    assert exc.value.message == "Newsletter.name must be a string"
    assert store.list_newsletters() == []


def test_non_text_email_is_rejected(store):
    with pytest.raises(ValidationError):
        store.find_or_create_subscriber("Ada", {"a": 1})
    assert store.list_subscribers() == []
