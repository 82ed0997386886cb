"""Tests for nsbundle.orchestrator."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

import pytest

from nsbundle.bundler import BundleError, EsbuildBundler
from nsbundle.models import Namespace
from nsbundle.orchestrator import Orchestrator
from tests._fixtures.fake_bundler import RecordingRunner
from tests._fixtures.page_builder import PageBuilder

HOME = """
<!doctype html>
<html>
<head><link rel="stylesheet" href="../../index.css"></head>
<body>
  <div id="box" class="card"><h1>Hi</h1><p>Body copy</p></div>
  <script type="module" src="./main.js"></script>
  <script type="module">
    import { greet } from './lib/greet.js';
    greet(document.getElementById('box'));
  </script>
  <script>
    document.querySelector('.card').classList.add('ready');
  </script>
</body>
</html>
"""


def _orchestrator(runner: RecordingRunner) -> Orchestrator:
    bundler = EsbuildBundler("esbuild", runner=runner)
    return Orchestrator(Namespace("acme-"), bundler=bundler)


def _seed_home(page_builder: PageBuilder) -> Path:
    page_builder.stylesheet("body { margin: 0; }\np { color: #333; }\n.card:hover { color: blue; }\n")
    return page_builder.page(
        "home",
        HOME,
        files={
            "main.js": "export const main = 1;\n",
            "lib/greet.js": "export function greet(el) { return el; }\n",
        },
    )


def test_build_page_writes_consistent_artifacts(page_builder: PageBuilder, tmp_path: Path) -> None:
    html_path = _seed_home(page_builder)
    runner = RecordingRunner()
    output_dir = tmp_path / "dist"

    artifacts = asyncio.run(_orchestrator(runner).build_page(html_path, output_dir))

    assert artifacts.page == "home"
    assert artifacts.bundle_js == output_dir.resolve() / "bundle.js"
    for path in artifacts.paths():
        assert path.exists()

    linked = artifacts.linked_html.read_text(encoding="utf-8")
    assert '<div id="acme-box" class="acme-card">' in linked
    assert '<p class="acme-p">Body copy</p>' in linked
    assert ".acme-body { margin: 0; }" in linked
    assert ".acme-card:hover { color: blue; }" in linked
    scripts = re.findall(r"<script\b[^>]*>.*?</script>", linked, re.S)
    assert scripts == ['<script src="bundle.js"></script>']

    standalone = artifacts.standalone_html.read_text(encoding="utf-8")
    bundle = artifacts.bundle_js.read_text(encoding="utf-8")
    assert bundle in standalone
    assert 'src="bundle.js"' not in standalone


def test_entry_combines_fragments_in_order(page_builder: PageBuilder, tmp_path: Path) -> None:
    html_path = _seed_home(page_builder)
    runner = RecordingRunner()

    asyncio.run(_orchestrator(runner).build_page(html_path, tmp_path / "dist"))

    entry = runner.entries[0]
    page_dir = html_path.parent.resolve()
    reexport = f"export * from '{(page_dir / 'main.js').as_posix()}';"
    module_import = f"from '{(page_dir / 'lib' / 'greet.js').as_posix()}'"
    assert entry.index(reexport) < entry.index(module_import)
    assert entry.index(module_import) < entry.index("(function() {")
    assert "getElementById('acme-box')" in entry
    assert "querySelector('.acme-card').classList.add('acme-ready')" in entry


def test_synthetic_entry_removed_after_build(page_builder: PageBuilder, tmp_path: Path) -> None:
    html_path = _seed_home(page_builder)
    runner = RecordingRunner()
    asyncio.run(_orchestrator(runner).build_page(html_path, tmp_path / "dist"))
    assert not runner.requests[0].entry.exists()
    assert not runner.requests[0].entry.parent.exists()


def test_bundle_failure_propagates_without_artifacts(
    page_builder: PageBuilder, tmp_path: Path
) -> None:
    html_path = page_builder.page(
        "broken",
        "<body><script type=\"module\">import x from './missing.js';</script></body>",
    )
    runner = RecordingRunner(fail_when_entry_contains=["missing.js"])
    output_dir = tmp_path / "dist"

    with pytest.raises(BundleError):
        asyncio.run(_orchestrator(runner).build_page(html_path, output_dir))

    assert not runner.requests[0].entry.exists()
    for name in ("bundle.js", "bundle.js.map", "index.html", "standalone.html"):
        assert not (output_dir / name).exists()


def test_page_without_stylesheet_keeps_links(page_builder: PageBuilder, tmp_path: Path) -> None:
    html_path = page_builder.page(
        "plain",
        '<head><link rel="stylesheet" href="../../index.css"></head><body><p>x</p></body>',
    )
    artifacts = asyncio.run(_orchestrator(RecordingRunner()).build_page(html_path, tmp_path / "out"))
    linked = artifacts.linked_html.read_text(encoding="utf-8")
    assert '<link rel="stylesheet" href="../../index.css">' in linked
    assert "<style>" not in linked


def test_discover_pages_requires_index_html(page_builder: PageBuilder) -> None:
    page_builder.page("b-page", "<body></body>")
    page_builder.page("a-page", "<body></body>")
    (page_builder.pages_dir / "assets").mkdir()
    pages = Orchestrator.discover_pages(page_builder.pages_dir)
    assert [path.parent.name for path in pages] == ["a-page", "b-page"]


def test_discover_pages_missing_directory(tmp_path: Path) -> None:
    assert Orchestrator.discover_pages(tmp_path / "nope") == []


def test_build_all_isolates_failures(page_builder: PageBuilder, tmp_path: Path) -> None:
    page_builder.page("one", "<body><script>first();</script></body>")
    page_builder.page("two", "<body><script>explode();</script></body>")
    page_builder.page("three", "<body><script>third();</script></body>")
    runner = RecordingRunner(fail_when_entry_contains=["explode"])
    output_dir = tmp_path / "dist"

    outcome = asyncio.run(_orchestrator(runner).build_all(page_builder.pages_dir, output_dir))

    assert not outcome.ok
    assert list(outcome.failures) == ["two"]
    assert "explode" in outcome.failures["two"]
    assert sorted(artifacts.page for artifacts in outcome.built) == ["one", "three"]
    for name in ("one", "three"):
        for filename in ("bundle.js", "index.html", "standalone.html"):
            assert (output_dir / name / filename).exists()
    assert not (output_dir / "two" / "index.html").exists()
    assert len(runner.requests) == 3


def test_entry_lives_inside_project_tree(page_builder: PageBuilder, tmp_path: Path) -> None:
    page_builder.write("node_modules/lit/index.js", "export const html = 1;\n")
    html_path = page_builder.page(
        "lit",
        """
        <body>
          <script type="module">
            import { html } from 'lit';
            console.log(html);
          </script>
        </body>
        """,
    )
    runner = RecordingRunner()

    asyncio.run(_orchestrator(runner).build_page(html_path, tmp_path / "dist"))

    entry = runner.requests[0].entry
    assert page_builder.root.resolve() in entry.parents
    assert entry.parent.parent == html_path.parent.resolve()
    assert "from 'lit'" in runner.entries[0]
    assert not entry.parent.exists()


def test_global_tag_classes_match_stylesheet(page_builder: PageBuilder, tmp_path: Path) -> None:
    page_builder.stylesheet("h1 { font-size: 2em; }\np { margin: 0; }\ndiv { padding: 0; }\n")
    html_path = page_builder.page(
        "tags",
        """
        <html>
        <head><link rel="stylesheet" href="../../index.css"></head>
        <body>
          <h1>Title</h1>
          <p>One</p>
          <p>Two</p>
          <div class="card">Card</div>
        </body>
        </html>
        """,
    )

    artifacts = asyncio.run(
        _orchestrator(RecordingRunner()).build_page(html_path, tmp_path / "dist")
    )
    linked = artifacts.linked_html.read_text(encoding="utf-8")

    style = re.search(r"<style>(.*?)</style>", linked, re.S).group(1)
    assert set(re.findall(r"\.acme-(\w+)", style)) == {"h1", "p", "div"}
    assert '<h1 class="acme-h1">Title</h1>' in linked
    assert linked.count('<p class="acme-p">') == 2
    assert '<div class="acme-card">Card</div>' in linked
    assert 'class="acme-div"' not in linked
