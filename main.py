from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from careerforge.api.v1.endpoints import admin, auth, resumes, share, users
from careerforge.core.config import settings
from careerforge.core.errors import register_exception_handlers
from careerforge.core.logging import configure_logging
from careerforge.db.database import connect_to_mongo, close_mongo_connection, db
from careerforge.services.notification_service import build_notifier
from contextlib import asynccontextmanager
import logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    await connect_to_mongo()
    yield
    await close_mongo_connection()

app = FastAPI(title="CareerForge API", version="1.0.0", lifespan=lifespan)
app.state.notifier = build_notifier(settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)
register_exception_handlers(app)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(resumes.router, prefix="/api/resumes", tags=["resumes"])
app.include_router(share.router, prefix="/api/share", tags=["share"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])

@app.get("/api/health", tags=["health"])
async def health():
    """Health check endpoint returning service and database status."""
    return {
        "status": "ok",
        "message": "Server is running",
        "database": "connected" if db.client is not None else "disconnected",
    }
