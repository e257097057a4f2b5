"""
OE Manuals: thumbnail file storage
"""

import os
import errno
import shutil
import time
from typing import BinaryIO, List as TList, Optional, Union
from uuid import uuid4

from werkzeug.utils import secure_filename

from ..errors.manual import AssetStorageError


__all__ = ['AssetStore']


class AssetStore(object):
    """
    Thumbnail files kept in a single directory on the local filesystem

    Assets are addressed by an opaque reference, which is the file name
    relative to the store root. References are random, so uploads that share
    the original file name never overwrite each other; only the extension of
    the suggested name is kept.
    """
    root: str = None

    def __init__(self, root: str):
        """
        :param root: asset storage directory
        """
        self.root = os.path.abspath(os.path.expanduser(root))

    def open(self) -> None:
        """
        Create the storage directory if missing
        """
        try:
            os.makedirs(self.root)
        except OSError as e:
            if e.errno != errno.EEXIST:
                raise AssetStorageError(asset=self.root, reason=e.strerror)

    def close(self) -> None:
        """
        Release storage; all writes are synchronous, so there is nothing to
        flush
        """

    @staticmethod
    def make_ref(suggested_name: Optional[str]) -> str:
        """
        Generate a unique asset reference

        :param suggested_name: original file name; only its extension is used

        :return: new asset reference
        """
        ext = os.path.splitext(secure_filename(suggested_name or ''))[1]
        return uuid4().hex + ext.lower()

    def _path(self, asset_ref: Optional[str]) -> Optional[str]:
        # Only plain file names produced by make_ref() are valid references
        if not asset_ref or asset_ref != secure_filename(asset_ref) or \
                asset_ref.startswith('.'):
            return None
        return os.path.join(self.root, asset_ref)

    def store(self, data: Union[bytes, BinaryIO],
              suggested_name: Optional[str] = None) -> str:
        """
        Save asset data; the file becomes visible under its final name only
        after it has been completely written

        :param data: file content as bytes or a binary stream opened for
            reading
        :param suggested_name: original file name

        :return: reference of the stored asset
        """
        asset_ref = self.make_ref(suggested_name)
        path = os.path.join(self.root, asset_ref)
        tmp_path = os.path.join(self.root, '.' + asset_ref + '.tmp')
        try:
            with open(tmp_path, 'wb') as f:
                if isinstance(data, (bytes, bytearray, memoryview)):
                    f.write(data)
                else:
                    shutil.copyfileobj(data, f)
            os.replace(tmp_path, path)
        except OSError as e:
            try:
                os.remove(tmp_path)
            except OSError:
                pass
            raise AssetStorageError(
                asset=suggested_name, reason=e.strerror or str(e))
        return asset_ref

    def resolve(self, asset_ref: Optional[str]) -> Optional[str]:
        """
        Return the filesystem path of the given asset

        :param asset_ref: asset reference

        :return: absolute path to the asset file or None if the asset does not
            exist
        """
        path = self._path(asset_ref)
        if path is None or not os.path.isfile(path):
            return None
        return path

    def delete(self, asset_ref: Optional[str]) -> bool:
        """
        Remove asset

        :param asset_ref: asset reference

        :return: True if the asset was removed, False if it did not exist
        """
        path = self._path(asset_ref)
        if path is None:
            return False
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise AssetStorageError(
                asset=asset_ref, reason=e.strerror or str(e))
        return True

    def age(self, asset_ref: Optional[str]) -> Optional[float]:
        """
        Return the time since the asset was written

        :param asset_ref: asset reference

        :return: age in seconds or None if the asset does not exist
        """
        path = self.resolve(asset_ref)
        if path is None:
            return None
        try:
            return time.time() - os.path.getmtime(path)
        except FileNotFoundError:
            return None

    def refs(self) -> TList[str]:
        """
        Return references of all stored assets, excluding incomplete writes

        :return: sorted list of asset references
        """
        try:
            names = os.listdir(self.root)
        except FileNotFoundError:
            return []
        return sorted(
            name for name in names
            if not name.startswith('.') and
            os.path.isfile(os.path.join(self.root, name)))
