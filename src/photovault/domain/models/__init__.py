from .core import Album, Asset, MediaType, Permission, Principal
from .query import Page, PageRequest

__all__ = [
    "Album",
    "Asset",
    "MediaType",
    "Page",
    "PageRequest",
    "Permission",
    "Principal",
]
