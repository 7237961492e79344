"""Tests for the OpenAPI document assembled from route docstrings."""

import unittest

from fastapi import APIRouter
from fastapi.testclient import TestClient

from api.config import Settings
from api.docs import (
    OPENAPI_VERSION,
    build_openapi,
    collect_paths,
    parse_docstring_spec,
)
from api.main import VERSION, create_app
from api.routes import auth


class TestParseDocstringSpec(unittest.TestCase):
    """Tests for parse_docstring_spec()."""

    def test_none_and_empty(self):
        self.assertEqual(parse_docstring_spec(None), {})
        self.assertEqual(parse_docstring_spec(""), {})

    def test_docstring_without_marker(self):
        self.assertEqual(parse_docstring_spec("Just a description."), {})

    def test_parses_yaml_after_marker(self):
        doc = """Summary line.

        More prose.

        ---
        summary: Проверка
        tags: [Auth]
        """
        self.assertEqual(parse_docstring_spec(doc), {"summary": "Проверка", "tags": ["Auth"]})

    def test_response_codes_become_strings(self):
        doc = """Summary.

        ---
        responses:
          200:
            description: OK
          401:
            description: Nope
        """
        spec = parse_docstring_spec(doc)
        self.assertEqual(set(spec["responses"]), {"200", "401"})

    def test_scalar_yaml_is_ignored(self):
        self.assertEqual(parse_docstring_spec("Summary.\n---\njust text"), {})

    def test_invalid_yaml_is_ignored(self):
        with self.assertLogs('api.docs', level='WARNING'):
            self.assertEqual(parse_docstring_spec("Summary.\n---\nsummary: [unclosed"), {})


class TestCollectPaths(unittest.TestCase):
    """Tests for collect_paths()."""

    def test_only_annotated_routes_are_collected(self):
        router = APIRouter()

        @router.post("/things")
        async def create_thing():
            """Create a thing.

            ---
            summary: Create
            """

        @router.get("/plain")
        async def plain():
            """Not documented."""

        paths = collect_paths([router])

        self.assertEqual(paths, {"/things": {"post": {"summary": "Create"}}})

    def test_router_prefix_is_part_of_path(self):
        router = APIRouter(prefix="/widgets")

        @router.post("/build")
        async def build():
            """Build a widget.

            ---
            summary: Build
            """

        self.assertEqual(set(collect_paths([router])), {"/widgets/build"})

    def test_auth_router_operations(self):
        paths = collect_paths([auth.router])

        self.assertEqual(set(paths), {"/auth", "/auth/login"})
        self.assertEqual(set(paths["/auth"]), {"post"})


class TestOpenAPIDocument(unittest.TestCase):
    """Tests for the document published by the application."""

    def setUp(self):
        self.settings = Settings(latency_ms=0, server_url="http://api.example:8099/api")
        self.app = create_app(self.settings)
        self.client = TestClient(self.app)

    def test_document_header(self):
        document = build_openapi(self.app, self.settings.server_url, self.app.state.documented_routers)

        self.assertEqual(document["openapi"], OPENAPI_VERSION)
        self.assertEqual(document["info"]["title"], "Emotion Diary API")
        self.assertEqual(document["info"]["version"], VERSION)
        self.assertEqual(document["servers"][0]["url"], "http://api.example:8099/api")
        self.assertEqual([tag["name"] for tag in document["tags"]], ["Auth"])

    def test_auth_operations_documented(self):
        paths = build_openapi(self.app, self.settings.server_url, self.app.state.documented_routers)["paths"]

        self.assertEqual(set(paths), {"/auth", "/auth/login"})
        register = paths["/auth"]["post"]
        self.assertEqual(register["summary"], "Регистрация нового пользователя")
        self.assertEqual(register["requestBody"]["content"]["application/json"]["schema"]["required"], ["login", "password"])
        self.assertIn("409", register["responses"])
        login = paths["/auth/login"]["post"]
        self.assertEqual(login["summary"], "Авторизация пользователя")
        self.assertIn("401", login["responses"])

    def test_app_registers_auth_router_for_docs(self):
        self.assertIn(auth.router, self.app.state.documented_routers)

    def test_openapi_json_route(self):
        response = self.client.get("/api-docs/openapi.json")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["openapi"], OPENAPI_VERSION)
        self.assertIn("/auth/login", body["paths"])

    def test_document_is_cached(self):
        first = self.client.get("/api-docs/openapi.json").json()
        cached = self.app.state.openapi_document

        self.assertEqual(first, cached)
        self.assertEqual(first, self.client.get("/api-docs/openapi.json").json())

    def test_swagger_ui_page(self):
        response = self.client.get("/api-docs")

        self.assertEqual(response.status_code, 200)
        self.assertIn("text/html", response.headers["content-type"])
        self.assertIn("Emotion Diary API Documentation", response.text)
        self.assertIn("/api-docs/openapi.json", response.text)
        self.assertIn(".swagger-ui .topbar { display: none }", response.text)


if __name__ == "__main__":
    unittest.main()
