# tests/test_routes.py
from listings_admin import crud


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_put_listing_and_read_back(client, listing, make_payload):
    body = make_payload(
        listingData={
            "listing_type": "museum",
            "google_maps_link": "https://maps.google.com/?q=museum",
            "tags": ["history", "family"],
            "google_place_id": "P1",
            "latitude": 33.3,
            "longitude": 44.4,
        },
        locationTranslations={"name_en": "Museum St", "name_ar": None, "location_id": None, "city_en": "Baghdad"},
        listingTranslations=[
            {"language_code": "en", "name": "Baghdad Museum", "highlights": ["Ishtar Gate replica"]},
        ],
        categoryIds=["cat-history", "cat-art"],
        collectionLinks=[{"collection_id": "col-a", "feature_on_home": True}],
    )
    resp = client.put(f"/listings/{listing}", json=body)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Listing updated successfully"}

    data = client.get(f"/listings/{listing}").json()
    assert data["tags"] == ["history", "family"]
    assert sorted(data["category_ids"]) == ["cat-art", "cat-history"]
    assert data["collection_links"] == [{"collection_id": "col-a", "feature_on_home": True}]
    assert data["location"]["google_place_id"] == "P1"
    assert data["location"]["translations"][0]["city"] == "Baghdad"
    assert data["translations"][0]["highlights"] == ["Ishtar Gate replica"]


def test_put_blank_listing_id(client, make_payload):
    resp = client.put("/listings/%20", json=make_payload())
    assert resp.status_code == 400


def test_put_unknown_listing(client, make_payload):
    resp = client.put("/listings/ghost", json=make_payload())
    assert resp.status_code == 404
    assert resp.json()["detail"]["step"] == "listing_core"


def test_put_step_failure_names_step(client, listing, make_payload, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("db unavailable")

    monkeypatch.setattr(crud, "upsert_listing_translations", boom)
    body = make_payload(listingTranslations=[{"language_code": "en", "name": "x"}])
    resp = client.put(f"/listings/{listing}", json=body)
    assert resp.status_code == 500
    detail = resp.json()["detail"]
    assert detail["step"] == "listing_translate"
    assert "db unavailable" in detail["message"]


def test_put_rejects_unknown_language(client, listing, make_payload):
    body = make_payload(listingTranslations=[{"language_code": "fr", "name": "Musée"}])
    assert client.put(f"/listings/{listing}", json=body).status_code == 422


def test_create_list_and_delete_listing(client, db):
    created = client.post("/listings", json={"listing_type": "cafe", "tags": ["coffee"]})
    assert created.status_code == 201
    listing_id = created.json()["id"]

    ids = [item["id"] for item in client.get("/listings").json()]
    assert listing_id in ids

    assert client.delete(f"/listings/{listing_id}").status_code == 200
    assert client.get(f"/listings/{listing_id}").status_code == 404
    assert client.delete(f"/listings/{listing_id}").status_code == 404


def test_collections_crud(client, db):
    resp = client.post("/collections", json={"name_en": "Old Baghdad", "name_ar": "بغداد القديمة", "slug": "old-baghdad"})
    assert resp.status_code == 201
    col = resp.json()
    assert col["name_ar"] == "بغداد القديمة"

    dup = client.post("/collections", json={"name_en": "Other", "slug": "old-baghdad"})
    assert dup.status_code == 409
    assert client.post("/collections", json={"name_ar": "x", "slug": "x"}).status_code == 400

    updated = client.put(f"/collections/{col['id']}", json={"name_en": "Historic Baghdad", "slug": "historic"})
    assert updated.status_code == 200
    assert updated.json()["name_en"] == "Historic Baghdad"
    assert updated.json()["name_ar"] == "بغداد القديمة"

    assert [c["slug"] for c in client.get("/collections").json()] == ["historic"]
    assert client.delete(f"/collections/{col['id']}").status_code == 200
    assert client.get(f"/collections/{col['id']}").status_code == 404


def test_put_requires_feature_flag(client, listing, make_payload):
    body = make_payload(collectionLinks=[{"collection_id": "col-a"}])
    assert client.put(f"/listings/{listing}", json=body).status_code == 422
