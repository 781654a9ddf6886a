import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from spendwise.db.core import Base, engine
from spendwise.logging_config import get_logger, setup_logging, setup_request_logging
from spendwise.routers.auth import router as auth_router
from spendwise.routers.transactions import router as transactions_router
from spendwise.routers.budgets import router as budgets_router
from spendwise.routers.goals import router as goals_router
from spendwise.routers.notifications import router as notifications_router
from spendwise.routers.analytics import router as analytics_router

SESSION_SECRET = os.getenv("SESSION_SECRET", "dev-only-session-secret-change-me")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(14 * 24 * 60 * 60)))
AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "true").lower() == "true"

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging()
    if AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    logger.info("SpendWise API started")
    yield


app = FastAPI(title="SpendWise API", lifespan=lifespan)

app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET,
    session_cookie="spendwise_session",
    max_age=SESSION_MAX_AGE,
    same_site="lax",
)
setup_request_logging(app)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(auth_router)
app.include_router(transactions_router)
app.include_router(budgets_router)
app.include_router(goals_router)
app.include_router(notifications_router)
app.include_router(analytics_router)


@app.get("/")
def read_root():
    return "Server is running."
