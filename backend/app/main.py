# Invoice dashboard backend entrypoint: thin FastAPI routes over the data-access layer.

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api import customers
from backend.app.api import dashboard
from backend.app.api import invoices
from backend.app.api import revenue
from backend.app.core.errors import DataAccessError
from backend.app.core.settings import get_settings
from backend.app.db.session import close_connection, get_connection

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    # A missing MONGODB_URI raises here and stops startup
    await get_connection().get_database()
    logger.info("Starting %s v%s (%s)", settings.app_name, settings.api_version, settings.environment)
    yield
    await close_connection()


app = FastAPI(lifespan=lifespan)

origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(invoices.router)
app.include_router(customers.router)
app.include_router(dashboard.router)
app.include_router(revenue.router)


@app.exception_handler(DataAccessError)
async def handle_data_access_error(request: Request, exc: DataAccessError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.get("/")
def read_root():
    return {"app": "Invoice Dashboard backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}
