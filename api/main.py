import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import config
from core.db import Database, get_db
from core.errors import install_error_handlers
from members import router as members_router
from projects import router as projects_router
from timesheet import router as timesheet_router

logger = logging.getLogger("timesheet_api")


def configure_logging() -> None:
    logging.basicConfig(
        level=config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process. Failing to connect aborts startup, no retry.
    try:
        app.state.db = await Database.connect()
    except Exception:
        logger.exception("db_connect_failed")
        raise
    logger.info("db_connected")
    try:
        yield
    finally:
        await app.state.db.close()
        app.state.db = None


configure_logging()

app = FastAPI(title="Timesheet API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)
install_error_handlers(app)

app.include_router(members_router.router, tags=["members"])
app.include_router(projects_router.router, tags=["projects"])
app.include_router(timesheet_router.router, tags=["timesheet"])


@app.get("/api/health", response_model=None)
async def health(db: Database = Depends(get_db)) -> dict | JSONResponse:
    try:
        await db.execute("SELECT 1")
    except Exception as exc:
        logger.warning("health_check_failed error=%s", exc)
        return JSONResponse(status_code=500, content={"status": "unhealthy", "error": str(exc)})
    return {"status": "healthy", "database": "connected"}


@app.get("/")
def root() -> dict:
    return {"message": "Timesheet API is running!"}


if __name__ == "__main__":
    uvicorn.run(app, host=config.server_host(), port=config.server_port())
