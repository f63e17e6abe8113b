from datetime import datetime

from sqlalchemy.exc import OperationalError

from app.models.category import Category
from app.models.image import Image
from app.models.property import Property
from app.models.property_images import PropertyImage
from app.services import category_service as category_service_module


def _seed_category(db, name="Villas", created_at=None, **kwargs):
    if created_at is not None:
        kwargs["created_at"] = created_at
    category = Category(name=name, **kwargs)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def _seed_property(db, category, title="P", featured=False, created_at=None):
    prop = Property(
        category_id=category.id,
        title_en=title,
        title_ar=f"{title}-ar",
        location="Kuwait City",
        video_url="https://video.example/v",
        featured=featured,
    )
    if created_at is not None:
        prop.created_at = created_at
    db.add(prop)
    db.commit()
    db.refresh(prop)
    return prop


def test_no_categories_returns_empty_list_and_caches_it(client, category_cache):
    r = client.get("/categories")
    assert r.status_code == 200
    assert r.json() == []
    assert category_cache.get() == []


def test_categories_newest_first(client, db_session):
    _seed_category(db_session, "Old", created_at=datetime(2023, 1, 1))
    _seed_category(db_session, "New", created_at=datetime(2024, 1, 1))
    _seed_category(db_session, "Mid", created_at=datetime(2023, 6, 1))

    names = [c["name"] for c in client.get("/categories").json()]
    assert names == ["New", "Mid", "Old"]


def test_category_bilingual_fields(client, db_session):
    _seed_category(
        db_session,
        "Villas",
        name_ar="فلل",
        description="Family homes",
        description_ar="منازل عائلية",
    )
    [category] = client.get("/categories").json()
    assert category["name_en"] == "Villas"
    assert category["name_ar"] == "فلل"
    assert category["description_en"] == "Family homes"
    assert category["description_ar"] == "منازل عائلية"
    assert category["images"] == []


def test_legacy_images_newest_first(client, db_session):
    category = _seed_category(db_session)
    db_session.add_all(
        [
            Image(
                category_id=category.id,
                filename="category_1/old.jpg",
                title="old",
                created_at=datetime(2023, 1, 1),
            ),
            Image(
                category_id=category.id,
                image_url="https://cdn.example/new.jpg",
                title="new",
                title_ar="جديد",
                created_at=datetime(2024, 1, 1),
            ),
        ]
    )
    db_session.commit()

    [result] = client.get("/categories").json()
    images = result["images"]
    assert [img["title"] for img in images] == ["new", "old"]
    assert images[0]["image_url"] == "https://cdn.example/new.jpg"
    assert images[0]["title_ar"] == "جديد"
    assert images[1]["image_url"] == "/uploads/category_1/old.jpg"
    assert all(img["source"] == "direct" for img in images)


def test_property_without_images_yields_placeholder(client, db_session):
    category = _seed_category(db_session)
    prop = _seed_property(db_session, category, title="Empty villa")

    [result] = client.get("/categories").json()
    assert len(result["images"]) == 1
    placeholder = result["images"][0]
    assert placeholder["image_url"] is None
    assert placeholder["property_id"] == prop.id
    assert placeholder["title"] == "Empty villa"
    assert placeholder["source"] == "property"


def test_property_images_follow_sort_order(client, db_session):
    category = _seed_category(db_session)
    prop = _seed_property(db_session, category)
    for order, url in [(2, "c.jpg"), (0, "a.jpg"), (1, "b.jpg")]:
        db_session.add(
            PropertyImage(property_id=prop.id, image_url=url, sort_order=order)
        )
    db_session.commit()

    [result] = client.get("/categories").json()
    assert [img["image_url"] for img in result["images"]] == ["a.jpg", "b.jpg", "c.jpg"]
    assert [img["sort_order"] for img in result["images"]] == [0, 1, 2]
    first = result["images"][0]
    assert first["location"] == "Kuwait City"
    assert first["video_url"] == "https://video.example/v"
    assert first["title_ar"] == "P-ar"
    assert first["id"].startswith("prop_")


def test_featured_properties_come_first(client, db_session):
    category = _seed_category(db_session)
    _seed_property(db_session, category, title="plain-new", created_at=datetime(2024, 5, 1))
    _seed_property(
        db_session, category, title="featured-old", featured=True, created_at=datetime(2023, 1, 1)
    )
    _seed_property(db_session, category, title="plain-old", created_at=datetime(2023, 5, 1))

    [result] = client.get("/categories").json()
    assert [img["title"] for img in result["images"]] == [
        "featured-old",
        "plain-new",
        "plain-old",
    ]
    assert result["images"][0]["featured"] is True


def test_property_branch_is_chosen_per_category(client, db_session):
    with_props = _seed_category(db_session, "With properties", created_at=datetime(2024, 1, 1))
    legacy = _seed_category(db_session, "Legacy only", created_at=datetime(2023, 1, 1))
    prop = _seed_property(db_session, with_props)
    db_session.add(PropertyImage(property_id=prop.id, image_url="p.jpg", sort_order=0))
    db_session.add(Image(category_id=legacy.id, image_url="legacy.jpg", title="l"))
    # Legacy rows of a category that has properties are not rendered
    db_session.add(Image(category_id=with_props.id, image_url="hidden.jpg"))
    db_session.commit()

    first, second = client.get("/categories").json()
    assert [img["image_url"] for img in first["images"]] == ["p.jpg"]
    assert [img["image_url"] for img in second["images"]] == ["legacy.jpg"]


def test_get_is_served_from_cache_until_invalidated(client, db_session):
    _seed_category(db_session, "First")
    assert len(client.get("/categories").json()) == 1

    # Written behind the API's back, so the snapshot does not know about it
    _seed_category(db_session, "Second")
    assert len(client.get("/categories").json()) == 1
    assert len(client.get("/categories", params={"refresh": "true"}).json()) == 2


def test_cache_bust_param_recomputes_and_refreshes_snapshot(
    client, db_session, category_cache
):
    _seed_category(db_session, "First")
    client.get("/categories")
    _seed_category(db_session, "Second")

    r = client.get("/categories", params={"t": "1700000000"})
    assert len(r.json()) == 2
    assert len(category_cache.get()) == 2


def test_snapshot_expires(client, db_session, clock):
    _seed_category(db_session, "First")
    client.get("/categories")
    _seed_category(db_session, "Second")

    clock.advance(599)
    assert len(client.get("/categories").json()) == 1
    clock.advance(1)
    assert len(client.get("/categories").json()) == 2


def test_create_category_clears_cache(client, auth_headers, category_cache):
    client.get("/categories")
    assert category_cache.get() == []

    r = client.post(
        "/categories", json={"name": "Villas", "name_ar": "فلل"}, headers=auth_headers
    )
    assert r.status_code == 201, r.text
    assert r.json()["name"] == "Villas"
    assert category_cache.get() is None

    [category] = client.get("/categories").json()
    assert category["name_ar"] == "فلل"
    assert category["images"] == []


def test_create_category_requires_name(client, auth_headers, category_cache):
    category_cache.set(["snapshot"])
    for payload in ({"name_ar": "فلل"}, {"name": "   "}):
        r = client.post("/categories", json=payload, headers=auth_headers)
        assert r.status_code == 400
        assert r.json()["error"] == "validation_error"
    assert category_cache.get() == ["snapshot"]


def test_update_category(client, db_session, auth_headers, category_cache):
    category = _seed_category(db_session, "Old name")
    client.get("/categories")

    r = client.put(
        f"/categories/{category.id}",
        json={"name": "New name", "description": "d"},
        headers=auth_headers,
    )
    assert r.status_code == 200
    assert r.json()["name"] == "New name"
    assert category_cache.get() is None
    assert client.get("/categories").json()[0]["name"] == "New name"


def test_update_and_delete_unknown_category_is_404(client, auth_headers, category_cache):
    category_cache.set(["snapshot"])
    r = client.put("/categories/999", json={"name": "x"}, headers=auth_headers)
    assert r.status_code == 404
    r = client.delete("/categories/999", headers=auth_headers)
    assert r.status_code == 404
    assert category_cache.get() == ["snapshot"]


def test_writes_require_credentials(client, db_session):
    r = client.post("/categories", json={"name": "Villas"})
    assert r.status_code == 401
    r = client.post(
        "/categories",
        json={"name": "Villas"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert r.status_code == 403


def test_delete_category_cascades_and_removes_files(
    client, db_session, auth_headers, upload_dir, stored_files
):
    category = _seed_category(db_session)
    folder = upload_dir / f"category_{category.id}"
    folder.mkdir()
    (folder / "kept.jpg").write_bytes(b"img")
    db_session.add_all(
        [
            Image(category_id=category.id, filename=f"category_{category.id}/kept.jpg"),
            # Row whose file is already gone from disk
            Image(category_id=category.id, filename=f"category_{category.id}/gone.jpg"),
        ]
    )
    prop = _seed_property(db_session, category)
    db_session.add(PropertyImage(property_id=prop.id, image_url="a.jpg", sort_order=0))
    db_session.commit()

    r = client.delete(f"/categories/{category.id}", headers=auth_headers)
    assert r.status_code == 200, r.text
    assert stored_files() == []

    db_session.expire_all()
    assert db_session.query(Property).count() == 0
    assert db_session.query(PropertyImage).count() == 0
    assert db_session.query(Image).count() == 0
    assert client.get("/categories").json() == []


def test_villas_scenario(client, auth_headers):
    r = client.post(
        "/categories", json={"name": "Villas", "name_ar": "فلل"}, headers=auth_headers
    )
    category_id = r.json()["id"]
    [listed] = client.get("/categories").json()
    assert listed["id"] == category_id and listed["images"] == []

    r = client.post(
        "/properties",
        json={
            "category_id": category_id,
            "title_en": "Sea view villa",
            "images": [
                {"image_url": "a.jpg", "title_en": "front"},
                {"image_url": "b.jpg", "title_ar": "خلف"},
            ],
        },
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    [listed] = client.get("/categories").json()
    assert [img["image_url"] for img in listed["images"]] == ["a.jpg", "b.jpg"]

    r = client.delete(f"/categories/{category_id}", headers=auth_headers)
    assert r.status_code == 200
    assert client.get("/categories").json() == []


def test_storage_error_midway_is_500_and_nothing_cached(
    client, db_session, monkeypatch, category_cache
):
    category = _seed_category(db_session)
    _seed_property(db_session, category)

    def _boom(self, property_ids):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    # Category and property reads succeed; the property image read fails
    monkeypatch.setattr(
        category_service_module.CategoryService, "_property_images_by_property", _boom
    )
    r = client.get("/categories")
    assert r.status_code == 500
    assert r.json() == {"detail": "Database error occurred", "error": "database_error"}
    assert "disk" not in r.text
    assert category_cache.get() is None


def test_write_during_recompute_does_not_leave_stale_snapshot(
    client, db_session, monkeypatch, category_cache
):
    _seed_category(db_session, "First")
    original = category_service_module.CategoryService.get_categories_with_media

    def _with_concurrent_write(self):
        result = original(self)
        # A write commits and invalidates after this read has finished
        _seed_category(db_session, "Second")
        category_cache.clear()
        return result

    monkeypatch.setattr(
        category_service_module.CategoryService,
        "get_categories_with_media",
        _with_concurrent_write,
    )
    assert [c["name"] for c in client.get("/categories").json()] == ["First"]
    assert category_cache.get() is None

    monkeypatch.setattr(
        category_service_module.CategoryService, "get_categories_with_media", original
    )
    names = {c["name"] for c in client.get("/categories").json()}
    assert names == {"First", "Second"}
