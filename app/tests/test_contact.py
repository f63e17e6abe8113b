from app.models.contact import Company, ContactInfo


def test_contact_is_grouped_by_type(client, db_session):
    db_session.add_all(
        [
            ContactInfo(type="phone", value="+965-1", label_en="Office", label_ar="المكتب"),
            ContactInfo(type="email", value="info@example.com"),
            ContactInfo(type="phone", value="+965-2", label_en="Mobile"),
        ]
    )
    db_session.commit()

    r = client.get("/contact")
    assert r.status_code == 200
    data = r.json()
    assert [entry["value"] for entry in data["phone"]] == ["+965-1", "+965-2"]
    assert data["phone"][0]["label_ar"] == "المكتب"
    assert data["email"] == [
        {"value": "info@example.com", "label_en": None, "label_ar": None}
    ]


def test_replace_contact_requires_auth(client, db_session):
    r = client.put("/contact", json={"phone": [{"value": "1"}]})
    assert r.status_code == 401


def test_replace_contact(client, db_session, auth_headers, category_cache):
    db_session.add(ContactInfo(type="fax", value="old"))
    db_session.commit()
    category_cache.set(["snapshot"])

    r = client.put(
        "/contact",
        json={
            "phone": [{"value": "+965-3", "label_en": "Office"}],
            "address": [{"value": "Kuwait City", "label_ar": "مدينة الكويت"}],
        },
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    assert set(r.json()) == {"phone", "address"}
    assert client.get("/contact").json()["address"][0]["label_ar"] == "مدينة الكويت"
    # Contact details are not part of the categories snapshot
    assert category_cache.get() == ["snapshot"]


def test_replace_contact_rejects_empty_value(client, db_session, auth_headers):
    r = client.put("/contact", json={"phone": [{"value": ""}]}, headers=auth_headers)
    assert r.status_code == 400


def test_companies(client, db_session):
    db_session.add_all([Company(name_en="Acme", name_ar="أكمي"), Company(name_en="Globex")])
    db_session.commit()
    r = client.get("/companies")
    assert r.status_code == 200
    assert r.json() == [
        {"name_en": "Acme", "name_ar": "أكمي"},
        {"name_en": "Globex", "name_ar": None},
    ]
