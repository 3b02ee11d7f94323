# listings_admin/crud.py
"""Persistence operations for listings and their related rows.

The write helpers used by the listing update pipeline (location resolution,
translation upserts, core update and association reconciliation) never
commit: `services.update_listing` owns the transaction boundaries. The
standalone helpers further down (create/delete listing, collections) commit
themselves.
"""
from typing import Any, Dict, Iterable, List, NamedTuple, Optional
from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from .db import insert as dialect_insert
from .models import (
    LANGUAGE_CODES, Collection, CollectionLink, CollectionTranslation, Listing, ListingCategory,
    ListingTranslation, Location, LocationTranslation, new_id,
)


class ListingNotFound(LookupError):
    pass


class TranslationUpsertError(Exception):
    def __init__(self, language_code, error):
        super().__init__(f"language_code={language_code}: {error}")
        self.language_code = language_code


class LinkDiff(NamedTuple):
    to_add: List[Any]
    to_remove: List[Any]
    to_update: List[Any]

    @property
    def is_empty(self):
        return not (self.to_add or self.to_remove or self.to_update)


# --- locations ---

def resolve_location(
    db: Session,
    google_place_id: Optional[str],
    latitude: Optional[float],
    longitude: Optional[float],
    location_id: Optional[str] = None,
    has_address: bool = False,
) -> Optional[str]:
    """Return the location id a listing should point at.

    A place id with both coordinates is upserted on the natural key and wins
    over `location_id`. Without them the existing reference passes through;
    if there is none but address text was supplied, a bare row is created so
    the address translations have somewhere to live.
    """
    if google_place_id and latitude is not None and longitude is not None:
        table = Location.__table__
        stmt = dialect_insert(db, table).values(
            id=new_id(), google_place_id=google_place_id, latitude=latitude, longitude=longitude,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["google_place_id"],
            set_={
                "latitude": stmt.excluded.latitude,
                "longitude": stmt.excluded.longitude,
                "updated_at": func.now(),
            },
        ).returning(table.c.id)
        return db.execute(stmt).scalar_one()
    if location_id:
        return location_id
    if has_address:
        loc = Location()
        db.add(loc)
        db.flush()
        return loc.id
    return None


def upsert_location_translations(db: Session, location_id: Optional[str], fields: Dict[str, Any]) -> List[str]:
    """Upsert per-language name/address/city rows; returns the language codes written.

    `fields` uses the flat payload keys (`name_en`, `address_ar`, ...). A
    language is written when it has a name, falling back to address then
    city for the name. Languages without input are left untouched.
    """
    if not location_id:
        return []
    table = LocationTranslation.__table__
    written = []
    for code in LANGUAGE_CODES:
        address = fields.get(f"address_{code}") or None
        city = fields.get(f"city_{code}") or None
        name = fields.get(f"name_{code}") or address or city
        if not name:
            continue
        stmt = dialect_insert(db, table).values(
            id=new_id(), location_id=location_id, language_code=code,
            name=name, address=address, city=city,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["location_id", "language_code"],
            set_={"name": stmt.excluded.name, "address": stmt.excluded.address, "city": stmt.excluded.city},
        )
        db.execute(stmt)
        written.append(code)
    return written


# --- listing core and translations ---

def update_listing_core(db: Session, listing_id: str, data: Dict[str, Any], location_id: Optional[str]):
    """Write the listing row. Optional columns are only touched when their key is present in `data`."""
    values = {"listing_type": data["listing_type"], "location_id": location_id}
    for key in ("google_maps_link", "tags"):
        if key in data:
            values[key] = data[key]
    stmt = (
        update(Listing)
        .where(Listing.id == listing_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    if result.rowcount == 0:
        raise ListingNotFound(f"Listing {listing_id} not found")


def upsert_listing_translations(db: Session, listing_id: str, entries: Iterable[Dict[str, Any]]) -> List[str]:
    """Upsert one row per entry keyed by (listing_id, language_code).

    Only keys present in an entry are overwritten on conflict, so fields the
    client left out keep their stored values.
    """
    table = ListingTranslation.__table__
    written = []
    for entry in entries:
        code = entry["language_code"]
        values = dict(entry, id=new_id(), listing_id=listing_id)
        stmt = dialect_insert(db, table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["listing_id", "language_code"],
            set_={k: stmt.excluded[k] for k in entry if k != "language_code"},
        )
        try:
            db.execute(stmt)
        except SQLAlchemyError as e:
            raise TranslationUpsertError(code, e) from e
        written.append(code)
    return written


# --- associations ---

def fetch_links(db: Session, model, key: str, listing_id: str, attrs: Iterable[str] = ()) -> Dict[Any, Dict[str, Any]]:
    attrs = list(attrs)
    cols = [getattr(model, key)] + [getattr(model, a) for a in attrs]
    rows = db.execute(select(*cols).where(model.listing_id == listing_id)).all()
    return {row[0]: dict(zip(attrs, row[1:])) for row in rows}


def delete_links(db: Session, model, key: str, listing_id: str, keys: List[Any]):
    db.execute(
        delete(model)
        .where(model.listing_id == listing_id, getattr(model, key).in_(keys))
        .execution_options(synchronize_session=False)
    )


def insert_links(db: Session, model, rows: List[Dict[str, Any]]):
    db.execute(insert(model), rows)


def update_link(db: Session, model, key: str, listing_id: str, key_value, attrs: Dict[str, Any]):
    db.execute(
        update(model)
        .where(model.listing_id == listing_id, getattr(model, key) == key_value)
        .values(**attrs)
        .execution_options(synchronize_session=False)
    )


def reconcile_links(db: Session, model, key: str, listing_id: str, desired: Dict[Any, Dict[str, Any]],
                    attrs: Iterable[str] = ()) -> LinkDiff:
    """Bring the association rows for `listing_id` in line with `desired`.

    `desired` maps the linked id to its per-link attributes. The current
    rows are read first, then one bulk delete, one bulk insert and one
    update per changed link are issued, each skipped when empty. The first
    failing write aborts the rest.
    """
    current = fetch_links(db, model, key, listing_id, attrs)
    to_remove = [k for k in current if k not in desired]
    to_add = [k for k in desired if k not in current]
    to_update = [k for k in desired if k in current and desired[k] != current[k]]

    if to_remove:
        delete_links(db, model, key, listing_id, to_remove)
    if to_add:
        insert_links(db, model, [dict(desired[k], listing_id=listing_id, **{key: k}) for k in to_add])
    for k in to_update:
        update_link(db, model, key, listing_id, k, desired[k])
    return LinkDiff(to_add, to_remove, to_update)


def reconcile_category_links(db: Session, listing_id: str, category_ids: Iterable[str]) -> LinkDiff:
    desired = {cid: {} for cid in category_ids}
    return reconcile_links(db, ListingCategory, "category_id", listing_id, desired)


def replace_collection_links(db: Session, listing_id: str, links: Iterable[Dict[str, Any]]) -> LinkDiff:
    # repeated collection ids collapse into one link, last flag wins
    desired = {link["collection_id"]: {"feature_on_home": bool(link["feature_on_home"])} for link in links}
    return reconcile_links(db, CollectionLink, "collection_id", listing_id, desired, attrs=["feature_on_home"])


# --- listing reads and standalone writes ---

def _listing_query(db: Session):
    return db.query(Listing).options(
        selectinload(Listing.translations),
        selectinload(Listing.category_links),
        selectinload(Listing.collection_links),
        selectinload(Listing.location).selectinload(Location.translations),
    )


def get_listing(db: Session, listing_id: str):
    return _listing_query(db).filter(Listing.id == listing_id).first()


def list_listings(db: Session):
    return _listing_query(db).order_by(Listing.created_at.desc()).all()


def create_listing(db: Session, data: Dict[str, Any]):
    obj = Listing(**data)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def delete_listing(db: Session, listing_id: str):
    obj = db.get(Listing, listing_id)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True


# --- collections ---

def collection_to_dict(obj: Collection) -> Dict[str, Any]:
    names = {t.language_code: t.name for t in obj.translations}
    return {"id": obj.id, "slug": obj.slug, "name_en": names.get("en", ""), "name_ar": names.get("ar", "")}


def list_collections(db: Session):
    return db.query(Collection).options(selectinload(Collection.translations)).order_by(Collection.created_at).all()


def get_collection(db: Session, collection_id: str):
    return db.get(Collection, collection_id)


def slug_taken(db: Session, slug: str, exclude_id: Optional[str] = None):
    q = db.query(Collection.id).filter(Collection.slug == slug)
    if exclude_id:
        q = q.filter(Collection.id != exclude_id)
    return q.first() is not None


def _upsert_collection_translations(db: Session, collection_id: str, names: Dict[str, Optional[str]]):
    table = CollectionTranslation.__table__
    for code, name in names.items():
        if name is None:
            continue
        stmt = dialect_insert(db, table).values(
            id=new_id(), collection_id=collection_id, language_code=code, name=name,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["collection_id", "language_code"], set_={"name": stmt.excluded.name},
        )
        db.execute(stmt)


def create_collection(db: Session, name_en: str, name_ar: Optional[str], slug: str):
    obj = Collection(name=name_en, slug=slug)
    db.add(obj)
    db.flush()
    _upsert_collection_translations(db, obj.id, {"en": name_en, "ar": name_ar or None})
    db.commit()
    db.refresh(obj)
    return obj


def update_collection(db: Session, collection_id: str, name_en: str, name_ar: Optional[str], slug: str):
    obj = db.get(Collection, collection_id)
    if not obj:
        return None
    obj.slug = slug
    obj.name = name_en
    _upsert_collection_translations(db, collection_id, {"en": name_en, "ar": name_ar})
    db.commit()
    db.refresh(obj)
    return obj


def delete_collection(db: Session, collection_id: str):
    obj = db.get(Collection, collection_id)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True
