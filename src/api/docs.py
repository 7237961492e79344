"""OpenAPI documentation assembled from route docstrings.

A handler documents itself by ending its docstring with a line holding only
``---`` followed by a YAML OpenAPI operation object::

    async def login(...):
        \"\"\"Check user credentials.

        ---
        summary: Авторизация пользователя
        responses:
          "200":
            description: OK
        \"\"\"

``build_openapi`` scans the routes of the documented routers (registered
in ``app.state.documented_routers``) for such blocks and merges
them into a single OpenAPI 3.0 document, served with Swagger UI under
``/api-docs``.
"""

import inspect
import logging

import yaml
from fastapi import APIRouter, FastAPI, Request
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.routing import APIRoute

from api.dependencies import get_settings

logger = logging.getLogger(__name__)

DOCS_PATH = "/api-docs"
OPENAPI_JSON_PATH = f"{DOCS_PATH}/openapi.json"
OPENAPI_VERSION = "3.0.0"

API_TITLE = "Emotion Diary API"
API_DESCRIPTION = "API для системы дневника эмоций и отслеживания настроения"
DOCS_SITE_TITLE = "Emotion Diary API Documentation"
SERVER_DESCRIPTION = "Локальный сервер разработки"

TAGS = [
    {
        "name": "Auth",
        "description": "Эндпоинты для аутентификации и регистрации",
    },
]

_ANNOTATION_MARKER = "---"
_HIDE_TOPBAR_CSS = "<style>.swagger-ui .topbar { display: none }</style>"


def parse_docstring_spec(doc: str | None) -> dict:
    """Return the YAML operation object embedded in doc, or {} if there is none."""
    if not doc:
        return {}

    lines = inspect.cleandoc(doc).splitlines()
    try:
        start = next(i for i, line in enumerate(lines) if line.strip() == _ANNOTATION_MARKER)
    except StopIteration:
        return {}

    block = "\n".join(lines[start + 1:])
    try:
        spec = yaml.safe_load(block)
    except yaml.YAMLError as e:
        logger.warning("Invalid OpenAPI annotation", extra={"error": str(e)})
        return {}

    if not isinstance(spec, dict):
        return {}
    # YAML reads bare status codes as ints; OpenAPI keys are strings
    if isinstance(spec.get("responses"), dict):
        spec["responses"] = {str(code): body for code, body in spec["responses"].items()}
    return spec


def collect_paths(routers) -> dict:
    """Build the OpenAPI ``paths`` object from the annotated routes of routers.

    Routes are read from each router directly; paths already carry the
    router prefix.
    """
    paths: dict[str, dict] = {}
    for route in (route for router in routers for route in router.routes):
        if not isinstance(route, APIRoute):
            continue
        operation = parse_docstring_spec(inspect.getdoc(route.endpoint))
        if not operation:
            continue
        for method in sorted(route.methods - {"HEAD"}):
            paths.setdefault(route.path, {})[method.lower()] = operation
    return paths


def build_openapi(app: FastAPI, server_url: str, routers) -> dict:
    """Assemble the OpenAPI document for app from the given documented routers."""
    return {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": API_TITLE,
            "version": app.version,
            "description": API_DESCRIPTION,
            "contact": {"name": "API Support"},
        },
        "servers": [{"url": server_url, "description": SERVER_DESCRIPTION}],
        "tags": TAGS,
        "paths": collect_paths(routers),
    }


def get_openapi_document(app: FastAPI, server_url: str) -> dict:
    """Return the cached OpenAPI document, building it on first use."""
    document = getattr(app.state, "openapi_document", None)
    if document is None:
        document = build_openapi(app, server_url, getattr(app.state, "documented_routers", ()))
        app.state.openapi_document = document
        logger.info("OpenAPI document built", extra={"pathCount": len(document["paths"])})
    return document


docs_router = APIRouter(tags=["meta"], include_in_schema=False)


@docs_router.get(OPENAPI_JSON_PATH)
async def openapi_json(request: Request):
    settings = get_settings(request)
    return JSONResponse(get_openapi_document(request.app, settings.server_url))


@docs_router.get(DOCS_PATH)
async def swagger_ui(request: Request):
    """Interactive documentation page."""
    page = get_swagger_ui_html(openapi_url=OPENAPI_JSON_PATH, title=DOCS_SITE_TITLE)
    html = page.body.decode("utf-8").replace("</head>", f"{_HIDE_TOPBAR_CSS}</head>", 1)
    return HTMLResponse(content=html)
