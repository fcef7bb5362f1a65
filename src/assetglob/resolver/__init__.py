"""
Extended glob resolution: compiles glob patterns to anchored regular
expressions, walks each pattern's root concurrently, and applies inclusion
and `!` negation patterns in order.

Usage::

    from assetglob.resolver import GlobResolver, ResolverConfig

    resolver = GlobResolver(ResolverConfig(workers=8))
    assets, matchers = resolver.resolve(["src/**/*.py", "!src/vendor/**"])
"""

from assetglob.resolver.compiler import compile_pattern
from assetglob.resolver.engine import GlobResolver, glob
from assetglob.resolver.roots import pattern_root
from assetglob.resolver.types import DEFAULT_WORKERS, FileAsset, Matcher, ResolverConfig
from assetglob.resolver.walker import walk

__all__ = [
    "DEFAULT_WORKERS",
    "FileAsset",
    "GlobResolver",
    "Matcher",
    "ResolverConfig",
    "compile_pattern",
    "glob",
    "pattern_root",
    "walk",
]
