from app.models.category import Category
from app.models.contact import ContactInfo
from app.models.user import AdminUser
from app.seed import SAMPLE_CATEGORIES, SAMPLE_CONTACTS, seed


def test_seed_is_idempotent(db_session):
    first = seed(db_session)
    assert first == {
        "categories": len(SAMPLE_CATEGORIES),
        "contacts": len(SAMPLE_CONTACTS),
    }
    second = seed(db_session)
    assert second == {"categories": 0, "contacts": 0}

    assert db_session.query(Category).count() == len(SAMPLE_CATEGORIES)
    assert db_session.query(ContactInfo).count() == len(SAMPLE_CONTACTS)
    assert db_session.query(AdminUser).count() == 1


def test_seeded_categories_are_listed(client, db_session):
    seed(db_session)
    names = {c["name"] for c in client.get("/categories").json()}
    assert names == {c["name"] for c in SAMPLE_CATEGORIES}
