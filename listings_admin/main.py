from contextlib import asynccontextmanager
from fastapi import FastAPI
from listings_admin.api.routes import router as api_router
from listings_admin.db import Base, engine
import listings_admin.models  # noqa: F401 ensure models are imported so tables are known


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Ensure database tables are created on startup
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Listings Admin API", lifespan=lifespan)
app.include_router(api_router)
