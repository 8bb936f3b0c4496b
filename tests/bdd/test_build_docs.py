"""Behaviour tests for a full documentation build.

These pytest-bdd scenarios drive ``build_docs`` from a markdown directory
through to the written artifacts. The feature file ``build_docs.feature``
describes a successful build and a build that fails because a page lacks its
``h1#doc-title`` heading.

Usage
-----
Run ``pytest tests/bdd/test_build_docs.py -v`` after installing the test
dependencies. Sources and outputs live under pytest's ``tmp_path``, so no
external services or files are required.
"""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from docs_builder.errors import BuildFailedError
from docs_builder.generator import build_docs
from docs_builder.models import BuildConfig, BuildResult

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "build_docs.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a docs directory with a titled page containing a PHP snippet")
def given_titled_page(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Write a single valid page with an unlabelled code block."""
    source = tmp_path / "docs"
    source.mkdir()
    (source / "routing.md").write_text(
        '<h1 id="doc-title">Routing</h1>\n\n'
        "## Basics\n\n"
        "```\n$routes->get('/users');\n```\n",
        encoding="utf-8",
    )
    scenario_state["source"] = source


@given("a docs directory with a page missing its title heading")
def given_untitled_page(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Write a page that only has a markdown heading."""
    source = tmp_path / "docs"
    source.mkdir()
    (source / "orphan.md").write_text("# Orphan\n\nBody.\n", encoding="utf-8")
    scenario_state["source"] = source


@when(parsers.parse('I build the docs for version "{version}"'))
def when_build(tmp_path: Path, scenario_state: dict[str, object], version: str) -> None:
    """Run the pipeline and keep its result."""
    source = typ.cast("Path", scenario_state["source"])
    scenario_state["result"] = build_docs(
        BuildConfig(source, tmp_path / "dist", version=version)
    )


@when(parsers.parse('I try to build the docs for version "{version}"'))
def when_try_build(
    tmp_path: Path, scenario_state: dict[str, object], version: str
) -> None:
    """Run the pipeline and keep the failure it raises."""
    source = typ.cast("Path", scenario_state["source"])
    with pytest.raises(BuildFailedError) as excinfo:
        build_docs(BuildConfig(source, tmp_path / "dist", version=version))
    scenario_state["error"] = excinfo.value


@then("the rendered page has a highlighted code block with a copy button")
def then_highlighted(scenario_state: dict[str, object]) -> None:
    """Check the rendered fragment for tokens and the copy affordance."""
    result = typ.cast("BuildResult", scenario_state["result"])
    html = result.output_files.rendered[0].read_text(encoding="utf-8")
    pre = BeautifulSoup(html, "html.parser").select_one("pre.language-php")
    assert pre is not None, f"expected a pre.language-php block in {html!r}"
    assert pre.select_one("div.button-wrapper > button.copy-button") is not None
    assert pre.select_one("code.language-php span") is not None


@then(parsers.parse('every search index line is a lexeme for version "{version}"'))
def then_index_lines(scenario_state: dict[str, object], version: str) -> None:
    """Every NDJSON line parses on its own and belongs to the version."""
    result = typ.cast("BuildResult", scenario_state["result"])
    lines = result.output_files.lexemes.read_text(encoding="utf-8").splitlines()
    assert len(lines) == result.lexemes_generated
    for line in lines:
        record = json.loads(line)
        assert record["version"] == version
        assert record["link"].startswith(f"/docs/{version}/routing")
        assert record["h1_inner_text"] == "Routing"


@then("meta.json lists the page title")
def then_meta(scenario_state: dict[str, object]) -> None:
    """The manifest has one entry for the page."""
    result = typ.cast("BuildResult", scenario_state["result"])
    meta = json.loads(result.output_files.meta.read_text(encoding="utf-8"))
    assert meta == [{"version": "1.x", "slug": "routing", "title": "Routing"}]


@then("the build fails naming the untitled page")
def then_failure(scenario_state: dict[str, object]) -> None:
    """The failure lists the offending slug."""
    error = typ.cast("BuildFailedError", scenario_state["error"])
    assert error.failed_slugs == ["orphan"]
