"""
OE Manuals: manual catalog and thumbnail errors
"""

from . import ConflictError, NotFoundError, StorageError


__all__ = [
    'AssetStorageError', 'DuplicateManualOrderError', 'UnknownAssetError',
    'UnknownManualError',
]


class UnknownManualError(NotFoundError):
    """
    Requested manual with unknown ID

    Extra attributes::
        id: requested manual ID
    """
    message = 'Unknown manual'


class DuplicateManualOrderError(ConflictError):
    """
    Manual with this order already exists

    Extra attributes::
        order: requested display order
    """
    message = 'Manual with this order already exists'


class UnknownAssetError(NotFoundError):
    """
    Requested thumbnail does not exist

    Extra attributes::
        asset: requested asset reference
    """
    message = 'Unknown thumbnail'


class AssetStorageError(StorageError):
    """
    Writing or removing a thumbnail file failed

    Extra attributes::
        asset: asset reference or suggested file name
        reason: error message describing the reason why the operation
            has failed
    """
    message = 'Cannot write thumbnail'
