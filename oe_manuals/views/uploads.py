"""
OE Manuals: thumbnail views
"""

from flask import Blueprint, Flask, Response, send_file

from ..errors.manual import UnknownAssetError
from ..resources import get_catalog


__all__ = ['register', 'blp']


blp = Blueprint('uploads', __name__)


def register(app: Flask) -> None:
    """
    Register endpoints under the configured public thumbnail prefix

    :param app: Flask application
    """
    app.register_blueprint(
        blp, url_prefix=app.config.get('ASSET_URL_PREFIX', '/uploads'))


@blp.route('/<asset_ref>')
def thumbnail(asset_ref: str) -> Response:
    """
    Return thumbnail image

    GET /uploads/[asset ref]

    :param asset_ref: thumbnail reference

    :return: raw image data
    """
    path = get_catalog().assets.resolve(asset_ref)
    if path is None:
        raise UnknownAssetError(asset=asset_ref)
    return send_file(path, max_age=3600)
