import json
import os
import tempfile
import unittest
from pathlib import Path

from starlette.requests import Request
from starlette.responses import FileResponse

from webui.assets import load_directory
from webui.errors import StartupError
from webui.handler import ServingHandler, create_handler

MTIME = 1_704_164_645  # 2024-01-02 03:04:05 UTC
LAST_MODIFIED = "Tue, 02 Jan 2024 03:04:05 GMT"
CONFIG = b'{"register":true,"version":{"x":"1"}}'


def _request(path):
    return Request({
        "type": "http",
        "method": "GET",
        "path": path,
        "root_path": "",
        "query_string": b"",
        "headers": [],
    })


class _BundleTestCase(unittest.TestCase):
    def _make_tree(self, files):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        for rel, data in files.items():
            target = Path(tmp.name) / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
            os.utime(target, (MTIME, MTIME))
        return load_directory(tmp.name)


class TestCreateHandler(_BundleTestCase):
    def test_substitutes_placeholder(self):
        handler = create_handler(CONFIG, self._make_tree({"build/index.html": b"<html>%CONFIG%</html>"}))
        self.assertEqual(handler.index_bytes, b'<html>{"register":true,"version":{"x":"1"}}</html>')
        self.assertEqual(handler.index_mod_time, LAST_MODIFIED)

    def test_only_first_placeholder_is_replaced(self):
        handler = create_handler(CONFIG, self._make_tree({"build/index.html": b"%CONFIG%|%CONFIG%"}))
        head, tail = handler.index_bytes.split(b"|")
        self.assertEqual(json.loads(head), {"register": True, "version": {"x": "1"}})
        self.assertEqual(tail, b"%CONFIG%")

    def test_missing_placeholder_passes_through(self):
        page = b"<html><body>static</body></html>"
        handler = create_handler(CONFIG, self._make_tree({"build/index.html": page}))
        self.assertEqual(handler.index_bytes, page)

    def test_missing_index_is_fatal(self):
        with self.assertRaises(StartupError):
            create_handler(CONFIG, self._make_tree({"build/static/app.js": b""}))

    def test_missing_build_dir_is_fatal(self):
        with self.assertRaises(StartupError):
            create_handler(CONFIG, self._make_tree({"index.html": b"%CONFIG%"}))

    def test_index_directory_is_fatal(self):
        with self.assertRaises(StartupError):
            create_handler(CONFIG, self._make_tree({"build/index.html/x": b""}))

    def test_handler_is_rooted_at_build(self):
        handler = create_handler(CONFIG, self._make_tree({"build/index.html": b"", "secret.txt": b"s"}))
        self.assertEqual(handler.assets.root, "build")
        self.assertEqual(handler.serve_other(_request("/secret.txt")).status_code, 404)

    def test_handler_is_immutable(self):
        handler = create_handler(CONFIG, self._make_tree({"build/index.html": b""}))
        self.assertIsInstance(handler, ServingHandler)
        with self.assertRaises(AttributeError):
            handler.index_bytes = b"other"
        with self.assertRaises(AttributeError):
            handler.extra = 1

    def test_index_is_not_reread(self):
        tree = self._make_tree({"build/index.html": b"<html>%CONFIG%</html>"})
        handler = create_handler(CONFIG, tree)
        tree.stat("build/index.html").path.write_bytes(b"changed")
        self.assertEqual(handler.serve_index(_request("/")).body, b'<html>{"register":true,"version":{"x":"1"}}</html>')


class TestServeIndex(_BundleTestCase):
    def setUp(self):
        self.handler = create_handler(CONFIG, self._make_tree({"build/index.html": b"<html>%CONFIG%</html>"}))

    def test_serves_cached_page(self):
        resp = self.handler.serve_index(_request("/"))
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.headers["content-type"].startswith("text/html"))
        self.assertEqual(resp.headers["last-modified"], LAST_MODIFIED)
        self.assertEqual(resp.body, self.handler.index_bytes)

    def test_is_idempotent(self):
        first = self.handler.serve_index(_request("/"))
        second = self.handler.serve_index(_request("/index.html"))
        self.assertEqual(first.body, second.body)
        self.assertEqual(first.headers["last-modified"], second.headers["last-modified"])


class TestServeOther(_BundleTestCase):
    def setUp(self):
        self.tree = self._make_tree({
            "build/index.html": b"<html>%CONFIG%</html>",
            "build/manifest.json": b'{"name":"ui"}',
            "build/static/js/app.js": b"console.log(1);",
        })
        self.handler = create_handler(CONFIG, self.tree)

    def test_serves_existing_file(self):
        resp = self.handler.serve_other(_request("/static/js/app.js"))
        self.assertIsInstance(resp, FileResponse)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(Path(resp.path), self.tree.stat("build/static/js/app.js").path)
        self.assertIn("javascript", resp.headers["content-type"])
        self.assertEqual(resp.headers["last-modified"], LAST_MODIFIED)

    def test_serves_manifest(self):
        resp = self.handler.serve_other(_request("/manifest.json"))
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.headers["content-type"].startswith("application/json"))

    def test_not_found_cases_are_bare_404(self):
        for path in (
            "/static/js/missing.js",
            "/static/js",
            "/static/",
            "/static",
            "/",
            "/static/../index.html",
            "/static//js/app.js",
        ):
            resp = self.handler.serve_other(_request(path))
            self.assertEqual(resp.status_code, 404, path)
            self.assertEqual(resp.body, b"", path)


if __name__ == "__main__":
    unittest.main()
