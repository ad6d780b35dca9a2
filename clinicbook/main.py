from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinicbook.api.api import api_router
from clinicbook.api.exception_handlers import register_exception_handlers
from clinicbook.core.config import settings
from clinicbook.core.logger import logger
from clinicbook.db.session import init_db
from clinicbook.middleware.log_middleware import LogMiddleware

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.CREATE_TABLES_ON_STARTUP:
        logger.info("Creating database tables")
        await init_db()
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LogMiddleware)

register_exception_handlers(app)

@app.get("/")
async def root():
    return {"message": "Welcome to ClinicBook API"}

app.include_router(api_router, prefix=settings.API_V1_STR)
