"""Bundling service adapters."""

from .esbuild import (
    BUNDLE_FILENAME,
    SOURCE_MAP_FILENAME,
    BundleError,
    BundleRequest,
    BundleResult,
    EsbuildBundler,
)

__all__ = [
    "BUNDLE_FILENAME",
    "SOURCE_MAP_FILENAME",
    "BundleError",
    "BundleRequest",
    "BundleResult",
    "EsbuildBundler",
]
