"""Adapter around the esbuild command-line bundler."""

from __future__ import annotations

import asyncio
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence

from ..logging import get_logger

BUNDLE_FILENAME = "bundle.js"
SOURCE_MAP_FILENAME = f"{BUNDLE_FILENAME}.map"


class BundleError(RuntimeError):
    """Raised when the bundler rejects the synthetic entry or cannot run."""


@dataclass
class BundleRequest:
    """Represents a single esbuild invocation."""

    entry: Path
    outfile: Path
    executable: str
    target: str
    sourcemap: bool

    def command(self) -> list[str]:
        args = [
            self.executable,
            str(self.entry),
            "--bundle",
            "--minify",
            "--format=iife",
            "--platform=browser",
            f"--target={self.target}",
            f"--outfile={self.outfile}",
            "--log-level=warning",
        ]
        if self.sourcemap:
            args.append("--sourcemap")
        return args


@dataclass
class BundleResult:
    """Minified script text and its source map."""

    code: str
    source_map: Optional[str] = None


Runner = Callable[[BundleRequest], Awaitable[None]]


class EsbuildBundler:
    """Compiles a synthetic entry into one minified, self-invoking script."""

    DEFAULT_EXECUTABLE = "esbuild"
    ENV_EXECUTABLE_KEYS = ("NSBUNDLE_ESBUILD", "ESBUILD_BINARY_PATH")

    def __init__(
        self,
        executable: str | None = None,
        *,
        target: str = "es2022",
        sourcemap: bool = True,
        runner: Runner | None = None,
    ) -> None:
        self.executable = self._resolve_executable(executable)
        self.target = target
        self.sourcemap = sourcemap
        self._runner = runner or self._cli_runner
        self.logger = get_logger("bundler")

    async def bundle(self, entry: Path, *, output_dir: Path) -> BundleResult:
        """Bundle ``entry`` and return the script with its source map.

        esbuild writes next to the entry (the scratch directory); the source
        map is re-rooted so its ``sources`` resolve from ``output_dir``.
        """
        request = BundleRequest(
            entry=entry,
            outfile=entry.parent / BUNDLE_FILENAME,
            executable=self.executable,
            target=self.target,
            sourcemap=self.sourcemap,
        )
        await self._runner(request)

        if not request.outfile.exists():
            raise BundleError(f"Bundler produced no output at {request.outfile}")
        code = request.outfile.read_text(encoding="utf-8")

        source_map = None
        map_path = request.outfile.with_name(SOURCE_MAP_FILENAME)
        if self.sourcemap and map_path.exists():
            source_map = relocate_source_map(
                map_path.read_text(encoding="utf-8"),
                from_dir=request.outfile.parent,
                to_dir=output_dir,
            )
        self.logger.info("Bundled and minified JavaScript (%d bytes)", len(code.encode("utf-8")))
        return BundleResult(code=code, source_map=source_map)

    @staticmethod
    async def _cli_runner(request: BundleRequest) -> None:
        args = request.command()
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise BundleError(
                f"Unable to locate '{request.executable}'. Install esbuild or set NSBUNDLE_ESBUILD."
            ) from exc
        _, stderr = await process.communicate()
        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise BundleError(
                f"esbuild failed with exit code {process.returncode}: {detail or 'no output'}"
            )

    def _resolve_executable(self, executable: str | None) -> str:
        if executable:
            return executable
        env_value = _first_env_value(self.ENV_EXECUTABLE_KEYS)
        if env_value:
            return env_value
        return self.DEFAULT_EXECUTABLE


def relocate_source_map(source_map: str, *, from_dir: Path, to_dir: Path) -> str:
    """Rewrite relative ``sources`` so they resolve from ``to_dir`` instead of ``from_dir``."""
    try:
        payload = json.loads(source_map)
    except json.JSONDecodeError as exc:
        raise BundleError("Bundler returned an invalid source map") from exc
    sources = payload.get("sources")
    if not isinstance(sources, list):
        return source_map
    relocated = []
    for source in sources:
        if not isinstance(source, str) or "://" in source or os.path.isabs(source):
            relocated.append(source)
            continue
        absolute = os.path.normpath(os.path.join(from_dir, source))
        relocated.append(Path(os.path.relpath(absolute, to_dir)).as_posix())
    payload["sources"] = relocated
    return json.dumps(payload, separators=(",", ":"))


def _first_env_value(keys: Sequence[str]) -> str | None:
    for key in keys:
        value = os.getenv(key)
        if value:
            return value
    return None


__all__ = [
    "BUNDLE_FILENAME",
    "SOURCE_MAP_FILENAME",
    "BundleError",
    "BundleRequest",
    "BundleResult",
    "EsbuildBundler",
    "relocate_source_map",
]
