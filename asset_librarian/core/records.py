"""
Catalog records for the three asset kinds

One dataclass per kind, sharing the id / name / created_at shape.
Records round-trip through plain dicts for the catalog store.
"""

from dataclasses import dataclass, field, fields, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Type


KIND_ASSETS = 'assets'
KIND_TEXTURES = 'textures'
KIND_STOCKSHOTS = 'stockshots'

ASSET_KINDS = (KIND_ASSETS, KIND_TEXTURES, KIND_STOCKSHOTS)

STOCKSHOT_VIDEO = 'video'
STOCKSHOT_SEQUENCE = 'sequence'


def now_iso() -> str:
    """Creation timestamp in ISO-8601"""
    return datetime.now().isoformat()


@dataclass
class BaseRecord:
    """Fields shared by every catalog record"""
    id: str
    name: str
    created_at: str = field(default_factory=now_iso)
    # Re-derived from id on every lookup, never persisted
    thumbnail_path: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop('thumbnail_path', None)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        known = {f.name for f in fields(cls) if f.name != 'thumbnail_path'}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class ModelRecord(BaseRecord):
    """3D asset: one FBX plus optional textures/ folder"""
    fbx_file_name: str = ""
    texture_count: int = 0


@dataclass
class TextureRecord(BaseRecord):
    """Texture set"""
    files: List[str] = field(default_factory=list)
    file_count: int = 0


@dataclass
class StockshotRecord(BaseRecord):
    """Video clip or ordered image sequence"""
    type: str = STOCKSHOT_VIDEO
    files: List[str] = field(default_factory=list)
    frame_count: int = 0


RECORD_TYPES: Dict[str, Type[BaseRecord]] = {
    KIND_ASSETS: ModelRecord,
    KIND_TEXTURES: TextureRecord,
    KIND_STOCKSHOTS: StockshotRecord,
}


def record_from_dict(kind: str, data: Dict[str, Any]) -> BaseRecord:
    """
    Build the record dataclass for a kind from persisted data.

    Args:
        kind: Asset kind
        data: Persisted record dict (unknown keys ignored)

    Returns:
        Record instance
    """
    try:
        record_type = RECORD_TYPES[kind]
    except KeyError:
        raise ValueError(f"Unknown asset kind: {kind}")
    return record_type.from_dict(data)


__all__ = [
    'KIND_ASSETS',
    'KIND_TEXTURES',
    'KIND_STOCKSHOTS',
    'ASSET_KINDS',
    'STOCKSHOT_VIDEO',
    'STOCKSHOT_SEQUENCE',
    'BaseRecord',
    'ModelRecord',
    'TextureRecord',
    'StockshotRecord',
    'RECORD_TYPES',
    'record_from_dict',
    'now_iso',
]
