from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from buildmarket.config import CORS_ORIGINS, HOST, LOG_LEVEL, PORT, setup_logging, check_settings
from buildmarket.database import init_db
from buildmarket.admin.routes import router as admin_router
from buildmarket.directory.routes import specialists_router, crews_router
from buildmarket.marketplace.routes import router as marketplace_router
from buildmarket.messaging.routes import router as messages_router
from buildmarket.notifications.routes import router as notifications_router
from buildmarket.reviews.routes import router as reviews_router
from buildmarket.tenders.routes import router as tenders_router
from buildmarket.uploads.routes import router as uploads_router
from buildmarket.users.routes import auth_router, router as users_router, stats_router

setup_logging()
logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    check_settings()
    init_db()
    logger.info("Database ready")
    yield


app = FastAPI(
    title="BuildMarket API",
    description="Construction services marketplace: tenders, bids, classifieds, specialists and crews",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error", "error": str(exc)},
    )


for router in (
    auth_router,
    users_router,
    stats_router,
    tenders_router,
    marketplace_router,
    messages_router,
    notifications_router,
    reviews_router,
    specialists_router,
    crews_router,
    admin_router,
    uploads_router,
):
    app.include_router(router, prefix=API_PREFIX)


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": "buildmarket"}


def serve():
    import uvicorn

    uvicorn.run("buildmarket.main:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    serve()
