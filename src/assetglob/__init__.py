from assetglob.errors import GlobError, PatternRootError, WalkError
from assetglob.resolver import (
    FileAsset,
    GlobResolver,
    Matcher,
    ResolverConfig,
    compile_pattern,
    glob,
    pattern_root,
)

__all__ = [
    "FileAsset",
    "GlobError",
    "GlobResolver",
    "Matcher",
    "PatternRootError",
    "ResolverConfig",
    "WalkError",
    "compile_pattern",
    "glob",
    "pattern_root",
]
