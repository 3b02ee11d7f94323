# listings_admin/services.py
"""Listing update pipeline.

`update_listing` applies one client payload across the location, listing,
translation, category and collection tables as a fixed sequence of steps.
The first failing step stops the run and is reported as `UpdateStepError`.

By default every step commits on its own, so steps that finished before a
failure stay applied. With `atomic=True` the whole run is one transaction
and a failure rolls everything back.

Updates to the same listing are serialized within this process. Across
processes the category step still reads then writes without isolation, so
two concurrent updates of one listing can lose each other's category edits.
"""
import threading
import time
from contextlib import contextmanager
from typing import Optional
from sqlalchemy.orm import Session
from . import config, crud, schemas
from .utils import logger

STEP_MESSAGES = {
    "location_resolve": "Failed to upsert location",
    "location_translate": "Failed to upsert location translations",
    "listing_core": "Failed to update listing",
    "listing_translate": "Failed to upsert listing translations",
    "category_reconcile": "Failed to update category links",
    "collection_replace": "Failed to update collection links",
    "commit": "Failed to commit listing update",
}


class UpdateStepError(Exception):
    def __init__(self, step, message):
        super().__init__(f"{step}: {message}")
        self.step = step
        self.message = message


class ListingNotFoundError(UpdateStepError):
    pass


_locks_guard = threading.Lock()
# listing id -> [lock, number of callers holding or waiting on it]
_listing_locks = {}


@contextmanager
def _listing_lock(listing_id):
    with _locks_guard:
        entry = _listing_locks.setdefault(listing_id, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _locks_guard:
            entry[1] -= 1
            if not entry[1]:
                del _listing_locks[listing_id]


class _Run:
    def __init__(self, db: Session, listing_id: str, atomic: bool, deadline: float):
        self.db = db
        self.listing_id = listing_id
        self.atomic = atomic
        self.deadline = deadline
        self.completed = []

    @contextmanager
    def step(self, name):
        try:
            if time.monotonic() > self.deadline:
                raise TimeoutError("deadline exceeded")
            yield
            if not self.atomic:
                self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error("Listing %s: step %s failed after %s: %s",
                         self.listing_id, name, self.completed or "nothing", e)
            if isinstance(e, crud.ListingNotFound):
                raise ListingNotFoundError(name, str(e)) from e
            raise UpdateStepError(name, f"{STEP_MESSAGES[name]}: {e}") from e
        self.completed.append(name)


def update_listing(
    db: Session,
    listing_id: str,
    payload: schemas.ListingUpdatePayload,
    atomic: Optional[bool] = None,
    deadline_seconds: Optional[float] = None,
):
    if not listing_id or not listing_id.strip():
        raise ValueError("listing_id missing")
    if atomic is None:
        atomic = config.UPDATE_ATOMIC
    if deadline_seconds is None:
        deadline_seconds = config.UPDATE_DEADLINE_SECONDS

    listing_data = payload.listing_data.model_dump(exclude_unset=True)
    loc = payload.location_translations.model_dump()
    has_address = any(loc.get(f"{field}_{code}") for field in ("address", "city") for code in ("en", "ar"))

    with _listing_lock(listing_id):
        run = _Run(db, listing_id, atomic, time.monotonic() + deadline_seconds)
        logger.info("Updating listing %s (atomic=%s)", listing_id, atomic)

        with run.step("location_resolve"):
            location_id = crud.resolve_location(
                db,
                listing_data.get("google_place_id"),
                listing_data.get("latitude"),
                listing_data.get("longitude"),
                loc.get("location_id"),
                has_address=has_address,
            )
        logger.debug("Listing %s resolved location %s", listing_id, location_id)

        with run.step("location_translate"):
            crud.upsert_location_translations(db, location_id, loc)

        with run.step("listing_core"):
            crud.update_listing_core(db, listing_id, listing_data, location_id)

        with run.step("listing_translate"):
            entries = [t.model_dump(exclude_unset=True) for t in payload.listing_translations]
            crud.upsert_listing_translations(db, listing_id, entries)

        with run.step("category_reconcile"):
            diff = crud.reconcile_category_links(db, listing_id, payload.category_ids)
        logger.debug("Listing %s categories +%d -%d", listing_id, len(diff.to_add), len(diff.to_remove))

        with run.step("collection_replace"):
            crud.replace_collection_links(db, listing_id, [c.model_dump() for c in payload.collection_links])

        if atomic:
            with run.step("commit"):
                db.commit()

    logger.info("Listing %s updated", listing_id)
    return location_id
