from contextlib import asynccontextmanager
import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from insiders.api.routes import router
from insiders.core.config import settings
from insiders.core.logging import configure_logging
from insiders.services.api_client import BackendClient
from insiders.services.customer_table import CustomerTable
from insiders.services.session_store import SessionStore

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    async with httpx.AsyncClient(base_url=settings.API_BASE_URL, timeout=settings.REQUEST_TIMEOUT) as http:
        app.state.backend = BackendClient(http)
        app.state.table = CustomerTable()
        app.state.session_store = SessionStore()
        yield

# Initialize the FastAPI application
app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# in dev we allow ALL origins.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/console")
