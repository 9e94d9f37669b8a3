from __future__ import annotations

from .assets import AssetCategory, AssetMove, asset_locations, categorize, plan_assets
from .base import Change, RewriteResponse, summarize_changes
from .metadata import rewrite_metadata
from .stylesheet import rewrite_stylesheets

__all__ = [
    "AssetCategory",
    "AssetMove",
    "Change",
    "RewriteResponse",
    "asset_locations",
    "categorize",
    "plan_assets",
    "rewrite_metadata",
    "rewrite_stylesheets",
    "summarize_changes",
]
