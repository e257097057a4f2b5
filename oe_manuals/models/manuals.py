"""
OE Manuals: manual data models
"""

from typing import Optional

from marshmallow.fields import Boolean, Integer, String

from ..schemas import ManualsSchema


__all__ = ['AssetCleanup', 'Manual', 'MutationResult']


class Manual(ManualsSchema):
    """
    Manual catalog entry

    Fields:
        id: unique integer manual ID; assigned automatically on creation and
            never reused
        video_link: link to the instructional video
        title: manual title
        description: manual description
        order: display order; unique across all manuals
        thumbnail: optional reference of the thumbnail image in the asset
            store
    """
    id: int = Integer(dump_default=None)
    video_link: str = String(dump_default=None)
    title: str = String(dump_default=None)
    description: str = String(dump_default=None)
    order: int = Integer(dump_default=None)
    thumbnail: Optional[str] = String(dump_default=None)


class AssetCleanup(ManualsSchema):
    """
    Outcome of the best-effort removal of a thumbnail that is no longer
    referenced by a manual

    Fields:
        asset: asset reference
        removed: True if the file was actually removed, False if it was
            already missing or could not be removed
        error: error message if removal failed
    """
    asset: str = String(dump_default=None)
    removed: bool = Boolean(dump_default=False)
    error: Optional[str] = String(dump_default=None)

    @property
    def failed(self) -> bool:
        return getattr(self, 'error', None) is not None


class MutationResult(object):
    """
    Result of a manual update or deletion: the affected manual plus
    the advisory outcome of the thumbnail cleanup, if any; the latter never
    changes the outcome of the operation itself
    """
    manual: Manual = None
    cleanup: Optional[AssetCleanup] = None

    def __init__(self, manual: Manual,
                 cleanup: Optional[AssetCleanup] = None):
        self.manual = manual
        self.cleanup = cleanup

    def __repr__(self) -> str:
        return '{}(manual={!r}, cleanup={!r})'.format(
            self.__class__.__name__, self.manual.to_dict(),
            self.cleanup.to_dict() if self.cleanup is not None else None)
