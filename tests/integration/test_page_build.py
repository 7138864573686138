"""
Integration tests for a full page build.

Runs build_pages through the real GraphQLClient against an
httpx.MockTransport that paginates model data the way the content API does.
"""

import json
import re
import sys

import httpx
import pytest

from builder_pages import main as cli
from builder_pages.client import GraphQLClient
from builder_pages.config import Config
from builder_pages.dev404 import DEV_404_PATH
from builder_pages.main import build_pages, load_hooks, run_pipeline
from builder_pages.pipeline import PageHooks
from builder_pages.registry import PageRegistry, PageRequest
from builder_pages.utils.exceptions import BuilderAPIError, ConfigurationError

SELECTION = re.compile(r"(\w+)\(limit: (\d+), offset: (\d+)")

HOOKS = PageHooks(filter=lambda record: True)


class ContentAPI:
    """MockTransport handler paginating per-model records."""

    def __init__(self, datasets, field_name="allBuilderModels", failures=0, status=503):
        self.datasets = datasets
        self.field_name = field_name
        self.failures = failures
        self.status = status
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self.requests) <= self.failures:
            return httpx.Response(self.status, text="unavailable")

        query = request.url.params["query"]
        models = {}
        for model, limit, offset in SELECTION.findall(query):
            limit, offset = int(limit), int(offset)
            models[model] = self.datasets.get(model, [])[offset:offset + limit]
        return httpx.Response(200, json={"data": {self.field_name: models}})


@pytest.fixture
def blog_data(record_factory):
    return {
        "posts": [
            record_factory("/blog/one", title="One"),
            record_factory("/blog/two", published="draft"),
            record_factory("/blog/three", title="Three"),
        ],
        "pages": [record_factory("/about", title="About")],
    }


class TestBuildPages:

    @pytest.mark.asyncio
    async def test_builds_published_pages(self, test_config, blog_data):
        test_config.pages.global_context = {"site": "blog"}
        api = ContentAPI(blog_data)
        registry = PageRegistry()

        async def add_title(record, query_fn):
            return {"title": record["content"]["data"]["title"]}

        stats = await build_pages(
            test_config,
            registry,
            hooks=PageHooks(map_entry_to_context=add_title),
            transport=httpx.MockTransport(api),
        )

        assert stats.rounds == 2
        assert len(api.requests) == 2
        assert sorted(page.path for page in registry.pages) == ["/about", "/blog/one", "/blog/three"]
        assert registry.get("/blog/one").context == {"site": "blog", "title": "One"}

    @pytest.mark.asyncio
    async def test_recovers_from_server_errors(self, test_config, blog_data):
        api = ContentAPI(blog_data, failures=2)
        registry = PageRegistry()

        stats = await build_pages(test_config, registry, transport=httpx.MockTransport(api))

        assert stats.attempts == 4
        assert stats.offsets == {"posts": 3, "pages": 1}
        assert len(registry) == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_three_attempts(self, test_config, blog_data):
        api = ContentAPI(blog_data, failures=10, status=500)
        registry = PageRegistry()

        with pytest.raises(BuilderAPIError) as exc_info:
            await build_pages(test_config, registry, transport=httpx.MockTransport(api))

        assert len(api.requests) == 3
        assert exc_info.value.status_code == 500
        assert exc_info.value.field_name == "allBuilderModels"
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_missing_template_stops_before_any_request(self, test_config, blog_data, tmp_path):
        test_config.pages.templates["news"] = str(tmp_path / "missing.js")
        api = ContentAPI(blog_data)

        with pytest.raises(ConfigurationError):
            await build_pages(test_config, PageRegistry(), transport=httpx.MockTransport(api))

        assert api.requests == []

    @pytest.mark.asyncio
    async def test_dev_404_page_overridden(self, test_config, blog_data):
        test_config.pages.override_dev_404 = True
        registry = PageRegistry()
        registry.create_page(PageRequest(DEV_404_PATH, "host/404.js"))

        await build_pages(test_config, registry, transport=httpx.MockTransport(ContentAPI(blog_data)))

        page = registry.get(DEV_404_PATH)
        assert page.component == test_config.pages.templates["posts"]
        assert page.context == {"noStaticContent": True}

    @pytest.mark.asyncio
    async def test_dev_404_page_created_for_fresh_registry(self, test_config, blog_data):
        test_config.pages.override_dev_404 = True
        test_config.pages.custom_404_dev = "custom/404.js"
        registry = PageRegistry()

        await build_pages(test_config, registry, transport=httpx.MockTransport(ContentAPI(blog_data)))

        page = registry.get(DEV_404_PATH)
        assert page.component == "custom/404.js"
        assert page.context == {"noStaticContent": True}
        assert len(registry) == 4

    @pytest.mark.asyncio
    async def test_invalid_model_name_stops_before_any_request(self, test_config, blog_data, templates):
        test_config.pages.templates = {"blog-post": templates["posts"]}
        api = ContentAPI(blog_data)

        with pytest.raises(ConfigurationError) as exc_info:
            await build_pages(test_config, PageRegistry(), transport=httpx.MockTransport(api))

        assert exc_info.value.model == "blog-post"
        assert api.requests == []


class TestLoadHooks:

    def test_loads_page_hooks(self):
        assert load_hooks(f"{__name__}:HOOKS") is HOOKS

    def test_rejects_non_hooks(self):
        with pytest.raises(ConfigurationError):
            load_hooks("json:dumps")

    def test_rejects_malformed_reference(self):
        with pytest.raises(ConfigurationError):
            load_hooks("no_colon_here")

    def test_rejects_missing_module(self):
        with pytest.raises(ConfigurationError):
            load_hooks("surely_not_a_module_name:HOOKS")


class TestCli:

    def test_show_query(self, tmp_path, monkeypatch, capsys, templates):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"pages": {"templates": templates, "limit": 5}}))
        monkeypatch.setattr(
            sys, "argv", ["builder-pages", "--config", str(config_file), "--show-query"]
        )

        cli.main()

        out = capsys.readouterr().out
        assert "posts(limit: 5, offset: 0," in out
        assert "pages(limit: 5, offset: 0," in out

    def test_configuration_error_exits_1(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "api": {"public_api_key": "key"},
            "pages": {"templates": {"posts": str(tmp_path / "missing.js")}},
        }))
        monkeypatch.setattr(
            sys, "argv",
            ["builder-pages", "--config", str(config_file), "--output", str(tmp_path / "p.json")],
        )

        with pytest.raises(SystemExit) as exc_info:
            cli.main()

        assert exc_info.value.code == 1

    def test_show_query_invalid_model_exits_1(self, tmp_path, monkeypatch, capsys, templates):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"pages": {"templates": {"blog-post": templates["posts"]}}}))
        monkeypatch.setattr(
            sys, "argv", ["builder-pages", "--config", str(config_file), "--show-query"]
        )

        with pytest.raises(SystemExit) as exc_info:
            cli.main()

        assert exc_info.value.code == 1
        assert "query {" not in capsys.readouterr().out

    def test_dev_404_page_written_to_output(self, tmp_path, monkeypatch, templates):
        config = Config.from_dict({
            "api": {"url": "https://content.test/graphql"},
            "pages": {
                "templates": templates,
                "override_dev_404": True,
                "custom_404_dev": "custom/404.js",
            },
        })
        output = tmp_path / "pages.json"

        async def no_records(self, query, variables=None):
            return {"allBuilderModels": {}}

        monkeypatch.setattr(GraphQLClient, "query", no_records)

        run_pipeline(config, output=str(output))

        pages = json.loads(output.read_text())
        assert pages == [
            {"path": DEV_404_PATH, "component": "custom/404.js", "context": {"noStaticContent": True}}
        ]
