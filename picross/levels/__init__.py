"""Picross level tools.

Provides bundling, uuid tagging and legacy conversion for level files.
"""
from .models import Level, BundlerConfig
from .bundle import collect_levels, find_level_files, write_bundle
from .uuid_tags import TagResult, insert_uuid, tag_tree
from .legacy import LegacyConverter, SequentialIds, convert_legacy, convert_text

__all__ = [
    # Models
    "Level",
    "BundlerConfig",

    # Bundle
    "collect_levels",
    "find_level_files",
    "write_bundle",

    # UUID tags
    "TagResult",
    "insert_uuid",
    "tag_tree",

    # Legacy conversion
    "LegacyConverter",
    "SequentialIds",
    "convert_legacy",
    "convert_text",
]
