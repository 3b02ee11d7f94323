# listings_admin/api/routes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import crud, schemas, services
from ..db import get_db
from ..utils import logger

router = APIRouter()

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/listings", response_model=List[schemas.ListingOut])
def listings(db: Session = Depends(get_db)):
    return crud.list_listings(db)


@router.post("/listings", response_model=schemas.ListingOut, status_code=201)
def create_listing(payload: schemas.ListingCreate, db: Session = Depends(get_db)):
    obj = crud.create_listing(db, payload.model_dump())
    logger.info("Created listing %s", obj.id)
    return crud.get_listing(db, obj.id)


@router.get("/listings/{listing_id}", response_model=schemas.ListingOut)
def get_listing(listing_id: str, db: Session = Depends(get_db)):
    obj = crud.get_listing(db, listing_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Listing not found")
    return obj


@router.put("/listings/{listing_id}")
def update_listing(listing_id: str, payload: schemas.ListingUpdatePayload, db: Session = Depends(get_db)):
    if not listing_id.strip():
        raise HTTPException(status_code=400, detail="Listing ID is required")
    try:
        services.update_listing(db, listing_id, payload)
    except services.ListingNotFoundError as e:
        raise HTTPException(status_code=404, detail={"message": e.message, "step": e.step})
    except services.UpdateStepError as e:
        logger.exception("Update of listing %s failed at %s", listing_id, e.step)
        raise HTTPException(status_code=500, detail={"message": e.message, "step": e.step})
    return {"message": "Listing updated successfully"}


@router.delete("/listings/{listing_id}")
def delete_listing(listing_id: str, db: Session = Depends(get_db)):
    ok = crud.delete_listing(db, listing_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Listing not found")
    return {"message": "Listing deleted successfully"}


@router.get("/collections", response_model=List[schemas.CollectionOut])
def collections(db: Session = Depends(get_db)):
    return [crud.collection_to_dict(c) for c in crud.list_collections(db)]


@router.post("/collections", response_model=schemas.CollectionOut, status_code=201)
def create_collection(payload: schemas.CollectionIn, db: Session = Depends(get_db)):
    if not payload.name_en or not payload.slug:
        raise HTTPException(status_code=400, detail="English name and slug are required")
    if crud.slug_taken(db, payload.slug):
        raise HTTPException(status_code=409, detail="Slug already exists. Please provide a unique slug.")
    obj = crud.create_collection(db, payload.name_en, payload.name_ar, payload.slug)
    return crud.collection_to_dict(obj)


@router.get("/collections/{collection_id}", response_model=schemas.CollectionOut)
def get_collection(collection_id: str, db: Session = Depends(get_db)):
    obj = crud.get_collection(db, collection_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Collection not found")
    return crud.collection_to_dict(obj)


@router.put("/collections/{collection_id}", response_model=schemas.CollectionOut)
def update_collection(collection_id: str, payload: schemas.CollectionIn, db: Session = Depends(get_db)):
    if not payload.name_en or not payload.slug:
        raise HTTPException(status_code=400, detail="English name and slug are required")
    if crud.slug_taken(db, payload.slug, exclude_id=collection_id):
        raise HTTPException(status_code=409, detail="Slug already exists. Please provide a unique slug.")
    obj = crud.update_collection(db, collection_id, payload.name_en, payload.name_ar, payload.slug)
    if not obj:
        raise HTTPException(status_code=404, detail="Collection not found")
    return crud.collection_to_dict(obj)


@router.delete("/collections/{collection_id}")
def delete_collection(collection_id: str, db: Session = Depends(get_db)):
    ok = crud.delete_collection(db, collection_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Collection not found")
    return {"message": "Collection deleted successfully"}
