"""CLI entrypoint for nsbundle."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from .bundler import BundleError, EsbuildBundler
from .config import ConfigError, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator
from .report import render_batch_summary, render_report


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nsbundle",
        description=(
            "Bundle a page's scripts and stylesheet into a namespaced, self-contained "
            "HTML snippet for embedding in a third-party CMS."
        ),
    )
    parser.add_argument(
        "--htmlfile",
        help="Path to the page's index.html (required unless --all is given).",
    )
    parser.add_argument(
        "--output",
        help="Directory that receives bundle.js, index.html and standalone.html.",
    )
    parser.add_argument(
        "--namespace",
        help='Prefix applied to every id and class, e.g. "acme-studio-".',
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Build every page under src/pages/<name>/index.html.",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .nsbundle.yml or the directory containing it (defaults to current directory).",
    )
    parser.add_argument(
        "--no-usage",
        action="store_true",
        help="Skip the embedding instructions printed after a build.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write detailed logs to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for nsbundle."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    try:
        config = load_config(Path(args.config)).with_overrides(
            namespace=args.namespace,
            output=args.output,
        )
        namespace = config.require_namespace()
        output_dir = config.require_output()
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    html_path: Path | None = None
    if not args.all:
        if not args.htmlfile:
            parser.exit(1, "Missing HTML path argument (--htmlfile).\n")
        html_path = Path(args.htmlfile).expanduser().resolve()
        if not html_path.is_file():
            parser.exit(1, f"File not found: {html_path}\n")
    elif not config.pages_dir.is_dir():
        parser.exit(1, f"Pages directory not found: {config.pages_dir}\n")

    bundler = EsbuildBundler(
        config.bundler.executable,
        target=config.bundler.target,
        sourcemap=config.bundler.sourcemap,
    )
    orchestrator = Orchestrator(namespace, bundler=bundler)
    show_usage = not args.no_usage

    if html_path is not None:
        try:
            artifacts = asyncio.run(orchestrator.build_page(html_path, output_dir))
        except BundleError as exc:
            parser.exit(1, f"Build failed: {exc}\n")
        except Exception as exc:  # pragma: no cover
            parser.exit(1, f"Build failed: {exc}\nRun with --verbose for more details.\n")
        print(render_report(artifacts, usage=show_usage, relative_to=Path.cwd()), end="")
        return

    outcome = asyncio.run(orchestrator.build_all(config.pages_dir, output_dir))
    for artifacts in outcome.built:
        print(render_report(artifacts, usage=False, relative_to=Path.cwd()), end="")
    print(render_batch_summary(outcome), end="")
    if not outcome.ok:
        parser.exit(1)


if __name__ == "__main__":
    main(sys.argv[1:])
