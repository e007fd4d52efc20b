import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.routing import APIRoute
from sqlalchemy import text

from atelier.api import api_router
from atelier.core.config import settings
from atelier.core.database import engine, init_db
from atelier.core.logging_config import configure_logging, truncate_for_log

configure_logging()
logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    """Operation ids of the form ``<tag>_<route name>`` for generated clients."""
    if route.tags:
        return f"{route.tags[0]}_{route.name}"
    return route.name


def custom_openapi():
    """
    OpenAPI schema with the caller identity header declared as a security scheme.
    """
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    openapi_schema["servers"] = [
        {"url": f"{settings.SERVER_HOST}:{settings.SERVER_PORT}", "description": "Development server"},
    ]

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "UserIdHeader": {
            "type": "apiKey",
            "in": "header",
            "name": "X-User-Id",
            "description": "Identifier of the calling user; required for saved rows and workflows.",
        }
    }
    openapi_schema["security"] = [{"UserIdHeader": []}]

    app.openapi_schema = openapi_schema
    return openapi_schema


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"[startup] {settings.PROJECT_NAME} ready, database tables checked")
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="AI-assisted fashion content studio: models, clothing, creations and marketplace copy.",
    license_info={
        "name": "MIT",
    },
    lifespan=lifespan,
    generate_unique_id_function=custom_generate_unique_id,
)


@app.middleware("http")
async def log_requests(request, call_next):
    logger.info(f"[REQUEST] {request.method} {request.url}")
    response = await call_next(request)
    logger.info(
        f"[RESPONSE] {response.__class__.__name__}"
        f"({response.status_code if hasattr(response, 'status_code') else 'streaming'}, "
        f"{getattr(response, 'media_type', 'unknown')})"
    )

    if hasattr(response, "body"):
        body_content = response.body.decode("utf-8", errors="ignore")
        logger.debug(f"[RESPONSE BODY] {truncate_for_log(body_content)}")

    return response


app.openapi = custom_openapi
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.all_cors_origins,
    allow_credentials=True,
    allow_methods=[
        "GET",
        "POST",
        "PATCH",
        "DELETE",
        "OPTIONS",
    ],
    allow_headers=["*"],
    expose_headers=["*"],
)
app.include_router(api_router)


@app.get("/")
def root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME} API"}


@app.get("/health/database")
def health_database() -> Dict[str, Any]:
    """
    Database health check endpoint
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return {
            "status": "connected",
            "dialect": engine.dialect.name,
        }
    except Exception as e:
        logger.error(f"[health_database] Database unreachable: {e}")
        raise HTTPException(
            status_code=503,
            detail={
                "status": "disconnected",
                "error": str(e),
                "dialect": engine.dialect.name,
            },
        )
