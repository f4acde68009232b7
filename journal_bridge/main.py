import logging
from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from journal_bridge.api.endpoints import auth, journal, routine, tasks, toggl
from journal_bridge.api.errors import journal_bridge_error_handler
from journal_bridge.core.exceptions import JournalBridgeError
from journal_bridge.core.settings import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up Journal Bridge API...")
    if not settings.TOGGL_API_TOKEN:
        logger.warning("TOGGL_API_TOKEN is not set. Toggl summaries will fail.")
    if not settings.NOTION_API_TOKEN:
        logger.warning("NOTION_API_TOKEN is not set. Notion endpoints will fail.")
    yield
    logger.info("Shutting down Journal Bridge API...")

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Syncs Toggl time entries and Notion tasks into the Notion journal.",
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(JournalBridgeError, journal_bridge_error_handler)

api_router = APIRouter(prefix=settings.API_PREFIX)

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(journal.router, prefix="/notion", tags=["Journal"])
api_router.include_router(toggl.router, prefix="/notion", tags=["Toggl"])
api_router.include_router(routine.router, prefix="/notion", tags=["Routines"])
api_router.include_router(tasks.router, prefix="/notion/task", tags=["Tasks"])

app.include_router(api_router)

@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Welcome to the Journal Bridge API",
        "version": settings.VERSION,
        "docs": f"{settings.API_PREFIX}/docs"
    }

@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy", "service": "journal-bridge"}

if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Uvicorn server for development...")
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
