"""
OE Manuals: manual catalog resource

Coordinates the manual record store and the thumbnail asset store so that
a thumbnail is written before the record referencing it is committed and
removed only after the record no longer references it.
"""

import re
from threading import RLock
from typing import Any, BinaryIO, List as TList, Mapping, Optional, Union

from flask import current_app

from ..errors import MissingFieldError, ValidationError
from ..errors.manual import DuplicateManualOrderError, UnknownManualError
from ..models import AssetCleanup, Manual, MutationResult
from .asset_store import AssetStore
from .catalog_store import CatalogStore


__all__ = ['CatalogManager', 'get_catalog']


# Extension key of the catalog manager in Flask app
EXTENSION_NAME = 'oe_manuals'

REQUIRED_TEXT_FIELDS = ('video_link', 'title', 'description')

# Signed 64-bit range of integer database columns
MIN_INTEGER = -(1 << 63)
MAX_INTEGER = (1 << 63) - 1

# Plain decimal integer, optionally signed
INTEGER_PATTERN = re.compile(r'\s*[+-]?[0-9]+\s*\Z')


def get_catalog() -> 'CatalogManager':
    """
    Return the catalog manager attached to the current app

    :return: catalog manager instance
    """
    return current_app.extensions[EXTENSION_NAME]


class CatalogManager(object):
    """
    Manual catalog: create, read, update, delete, and list manuals together
    with their thumbnails

    Must be used within the Flask app context.
    """
    def __init__(self, catalog_store: CatalogStore, asset_store: AssetStore):
        """
        :param catalog_store: manual record store
        :param asset_store: thumbnail store
        """
        self.records = catalog_store
        self.assets = asset_store
        # Record writes within this process; other processes are held off by
        # the unique constraint on manuals.order
        self._lock = RLock()

    def open(self) -> None:
        """
        Open both stores; call once at startup
        """
        self.assets.open()
        self.records.open()

    def close(self) -> None:
        """
        Close both stores; call once at shutdown
        """
        self.records.close()
        self.assets.close()

    @staticmethod
    def validate(fields: Mapping[str, Any]) -> Manual:
        """
        Check that all required manual fields are present and well-formed

        :param fields: raw field values keyed by data model field names

        :return: manual object containing the validated fields; ID and
            thumbnail are never taken from `fields`
        """
        kw = {}
        for name in REQUIRED_TEXT_FIELDS:
            val = fields.get(name)
            if val is None:
                raise MissingFieldError(field=name)
            val = str(val)
            if not val.strip():
                raise MissingFieldError(field=name)
            kw[name] = val

        order = fields.get('order')
        if order is None or isinstance(order, str) and not order.strip():
            raise MissingFieldError(field='order')
        if isinstance(order, bool):
            raise ValidationError('order', 'Order must be an integer')
        if isinstance(order, float):
            if not order.is_integer():
                raise ValidationError('order', 'Order must be an integer')
            order = int(order)
        elif not isinstance(order, int):
            if not INTEGER_PATTERN.match(str(order)):
                raise ValidationError('order', 'Order must be an integer')
            order = int(str(order).strip())
        if not MIN_INTEGER <= order <= MAX_INTEGER:
            raise ValidationError('order', 'Order is out of range')
        kw['order'] = order

        return Manual(**kw)

    @staticmethod
    def _parse_id(manual_id: Union[int, str]) -> int:
        if isinstance(manual_id, bool) or not isinstance(manual_id, int) and \
                not INTEGER_PATTERN.match(str(manual_id)):
            raise UnknownManualError(id=manual_id)
        value = int(manual_id)
        if not MIN_INTEGER <= value <= MAX_INTEGER:
            # No record can have an ID the database cannot store
            raise UnknownManualError(id=manual_id)
        return value

    def _release_asset(self, asset_ref: str) -> AssetCleanup:
        """
        Remove thumbnail that is no longer referenced; failure is logged and
        reported in the returned cleanup outcome but never raised

        :param asset_ref: asset reference

        :return: cleanup outcome
        """
        # noinspection PyBroadException
        try:
            removed = self.assets.delete(asset_ref)
        except Exception as e:
            current_app.logger.warning(
                'Error removing thumbnail "%s" [%s]', asset_ref, e)
            return AssetCleanup(asset=asset_ref, removed=False, error=str(e))

        if removed:
            current_app.logger.info('Removed thumbnail "%s"', asset_ref)
        else:
            current_app.logger.warning(
                'Thumbnail "%s" was already missing', asset_ref)
        return AssetCleanup(asset=asset_ref, removed=removed)

    def create(self, fields: Mapping[str, Any],
               thumbnail: Optional[Union[bytes, BinaryIO]] = None,
               thumbnail_name: Optional[str] = None) -> Manual:
        """
        Create a new manual

        :param fields: raw manual field values keyed by data model field names
        :param thumbnail: optional thumbnail data
        :param thumbnail_name: original thumbnail file name

        :return: new manual object with ID assigned
        """
        manual = self.validate(fields)

        # Fail early without writing the thumbnail
        if self.records.find_by_order(manual.order) is not None:
            raise DuplicateManualOrderError(order=manual.order)

        if thumbnail is not None:
            manual.thumbnail = self.assets.store(thumbnail, thumbnail_name)

        try:
            with self._lock:
                manual = self.records.insert(manual)
        except Exception:
            if thumbnail is not None:
                # Don't leave the new thumbnail orphaned
                self._release_asset(manual.thumbnail)
            raise

        current_app.logger.info(
            'Created manual %s (order %s)', manual.id, manual.order)
        return manual

    def get(self, manual_id: Union[int, str]) -> Manual:
        """
        Return manual with the given ID

        :param manual_id: manual ID

        :return: manual object
        """
        manual = self.records.find_by_id(self._parse_id(manual_id))
        if manual is None:
            raise UnknownManualError(id=manual_id)
        return manual

    def query(self) -> TList[Manual]:
        """
        Return all manuals in the order they were created; clients that need
        the display order must sort by the `order` field

        :return: list of manual objects
        """
        return self.records.list_all()

    def update(self, manual_id: Union[int, str], fields: Mapping[str, Any],
               thumbnail: Optional[Union[bytes, BinaryIO]] = None,
               thumbnail_name: Optional[str] = None) -> MutationResult:
        """
        Update an existing manual, optionally replacing its thumbnail; the old
        thumbnail is removed after the record update is committed

        :param manual_id: manual ID
        :param fields: raw manual field values keyed by data model field names
        :param thumbnail: optional new thumbnail data
        :param thumbnail_name: original thumbnail file name

        :return: updated manual and the outcome of the old thumbnail removal
        """
        patch = self.validate(fields)
        manual_id = self._parse_id(manual_id)

        existing = self.records.find_by_order(patch.order)
        if existing is not None and existing.id != manual_id:
            raise DuplicateManualOrderError(order=patch.order)

        current = self.records.find_by_id(manual_id)
        if current is None:
            raise UnknownManualError(id=manual_id)

        if thumbnail is not None:
            patch.thumbnail = self.assets.store(thumbnail, thumbnail_name)

        try:
            with self._lock:
                manual = self.records.update(manual_id, patch)
        except Exception:
            if thumbnail is not None:
                self._release_asset(patch.thumbnail)
            raise

        current_app.logger.info(
            'Updated manual %s (order %s)', manual.id, manual.order)

        cleanup = None
        if thumbnail is not None and current.thumbnail and \
                current.thumbnail != manual.thumbnail:
            cleanup = self._release_asset(current.thumbnail)
        return MutationResult(manual, cleanup)

    def delete(self, manual_id: Union[int, str]) -> MutationResult:
        """
        Delete manual and its thumbnail; thumbnail removal is best-effort

        :param manual_id: manual ID

        :return: removed manual and the outcome of its thumbnail removal
        """
        with self._lock:
            manual = self.records.delete(self._parse_id(manual_id))
        if manual is None:
            raise UnknownManualError(id=manual_id)

        current_app.logger.info(
            'Deleted manual %s (order %s)', manual.id, manual.order)

        cleanup = None
        if manual.thumbnail:
            cleanup = self._release_asset(manual.thumbnail)
        return MutationResult(manual, cleanup)

    def find_orphans(self, min_age: float = 0) -> TList[str]:
        """
        Return stored thumbnails that are not referenced by any manual, e.g.
        left after a failed cleanup

        :param min_age: ignore thumbnails modified less than this number of
            seconds ago; a thumbnail being attached to a new manual is not
            referenced until the record is committed

        :return: list of asset references
        """
        # List assets before records so that a thumbnail committed in between
        # is not reported
        refs = self.assets.refs()
        referenced = self.records.thumbnails()
        return [ref for ref in refs
                if ref not in referenced and
                (self.assets.age(ref) or 0) >= min_age]

    def purge_orphans(self, min_age: float = 3600) -> TList[str]:
        """
        Remove thumbnails that are not referenced by any manual

        :param min_age: only remove thumbnails older than this number of
            seconds

        :return: list of removed asset references
        """
        removed = [ref for ref in self.find_orphans(min_age)
                   if self.assets.delete(ref)]
        if removed:
            current_app.logger.info(
                'Removed %d orphaned thumbnail%s', len(removed),
                's' if len(removed) > 1 else '')
        return removed
