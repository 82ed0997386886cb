"""Pipeline orchestration for single-page and batch builds."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .assembler import OutputAssembler, find_stylesheet, write_artifacts
from .bundler import EsbuildBundler
from .entry import EntrySynthesizer, synthetic_entry
from .extractor import FragmentExtractor
from .logging import get_logger
from .models import BatchOutcome, BuildArtifacts, Namespace, PageSource

PAGE_ENTRY_FILENAME = "index.html"


class Orchestrator:
    """Drives pages through extraction, synthesis, bundling and assembly.

    The namespace is fixed for the lifetime of the orchestrator and handed to
    every stage explicitly. Pages never share state, and batch builds run them
    one after another.
    """

    def __init__(
        self,
        namespace: Namespace,
        *,
        bundler: EsbuildBundler | None = None,
        extractor: FragmentExtractor | None = None,
        synthesizer: EntrySynthesizer | None = None,
        assembler: OutputAssembler | None = None,
    ) -> None:
        self.namespace = namespace
        self.bundler = bundler or EsbuildBundler()
        self.extractor = extractor or FragmentExtractor(namespace)
        self.synthesizer = synthesizer or EntrySynthesizer()
        self.assembler = assembler or OutputAssembler(namespace)
        self.logger = get_logger("orchestrator")

    async def build_page(self, html_path: Path, output_dir: Path) -> BuildArtifacts:
        """Build one page into ``output_dir``.

        Bundling errors propagate unchanged; in that case the temporary entry
        is already gone and no artifact has been written.
        """
        page = PageSource.read(html_path)
        output_dir = Path(output_dir).expanduser().resolve()
        self.logger.info("Building %s...", page.name)

        fragments = self.extractor.extract(page)
        if fragments.is_empty:
            self.logger.debug("No scripts found in %s; bundle will be empty", page.path)
        entry_source = self.synthesizer.synthesize(fragments, page.directory)

        with synthetic_entry(entry_source, page.directory) as entry_path:
            bundle = await self.bundler.bundle(entry_path, output_dir=output_dir)

        stylesheet_text: Optional[str] = None
        stylesheet_path = find_stylesheet(page.directory)
        if stylesheet_path is not None:
            self.logger.debug("Using stylesheet %s", stylesheet_path)
            stylesheet_text = stylesheet_path.read_text(encoding="utf-8")

        assembled = self.assembler.assemble(page.html, bundle.code, stylesheet_text)
        artifacts = write_artifacts(output_dir, page.name, assembled, bundle)
        self.logger.info("Generated HTML with namespaced ids and classes in %s", output_dir)
        return artifacts

    @staticmethod
    def discover_pages(pages_dir: Path) -> List[Path]:
        """Return ``index.html`` paths of every immediate subdirectory, sorted by name."""
        if not pages_dir.is_dir():
            return []
        return [
            child / PAGE_ENTRY_FILENAME
            for child in sorted(pages_dir.iterdir(), key=lambda path: path.name)
            if child.is_dir() and (child / PAGE_ENTRY_FILENAME).is_file()
        ]

    async def build_all(self, pages_dir: Path, output_dir: Path) -> BatchOutcome:
        """Build every discovered page into ``<output_dir>/<page name>``.

        A page that fails is logged and recorded; the remaining pages still build.
        """
        outcome = BatchOutcome()
        pages = self.discover_pages(pages_dir)
        self.logger.info("Building %d page(s) from %s", len(pages), pages_dir)
        for html_path in pages:
            page_name = html_path.parent.name
            try:
                artifacts = await self.build_page(html_path, Path(output_dir) / page_name)
            except Exception as exc:
                self.logger.error("Failed to build %s: %s", page_name, exc)
                self.logger.debug("Failure details for %s", page_name, exc_info=True)
                outcome.failures[page_name] = str(exc)
                continue
            outcome.built.append(artifacts)
        return outcome


__all__ = ["PAGE_ENTRY_FILENAME", "Orchestrator"]
