"""
OE Manuals: manual views
"""

from typing import Optional

from flask import Blueprint, Flask, Response, request
from werkzeug.datastructures import FileStorage

from .. import json_response
from ..models import MutationResult
from ..resources import get_catalog
from ..schemas.api.v1 import ManualSchema


__all__ = ['register', 'blp']


blp = Blueprint('manuals', __name__, url_prefix='/oe_manuals')


def register(app: Flask) -> None:
    """
    Register endpoints

    :param app: Flask application
    """
    app.register_blueprint(blp)


def get_thumbnail() -> Optional[FileStorage]:
    """
    Return the thumbnail file uploaded with the request, if any; a file part
    with no file selected does not count

    :return: uploaded file or None
    """
    thumbnail = request.files.get('thumbnail')
    if thumbnail is None or not thumbnail.filename:
        return None
    return thumbnail


def mutation_response(res: MutationResult) -> Response:
    """
    Return the manual affected by update or delete; a failed thumbnail cleanup
    is reported in the response meta without changing the status

    :param res: manual update or deletion result

    :return: JSON response
    """
    meta = None
    if res.cleanup is not None and res.cleanup.failed:
        meta = {'thumbnail_cleanup': res.cleanup}
    return json_response(ManualSchema.from_model(res.manual), meta=meta)


@blp.route('', methods=['GET', 'POST'], strict_slashes=False)
def manuals() -> Response:
    """
    Return or create manual(s)

    GET /oe_manuals
        - return a list of all manuals in the order they were created

    POST /oe_manuals?videoLink=...&title=...&description=...&order=...
        - create manual with the given parameters; an optional thumbnail image
          is sent as multipart/form-data file part named "thumbnail"

    :return:
        GET: JSON response containing a list of serialized manuals
        POST: JSON-serialized manual
    """
    catalog = get_catalog()

    if request.method == 'GET':
        # List all manuals
        return json_response(
            [ManualSchema.from_model(manual) for manual in catalog.query()])

    if request.method == 'POST':
        # Create manual
        thumbnail = get_thumbnail()
        manual = catalog.create(
            ManualSchema.input_fields(request.args),
            thumbnail.stream if thumbnail is not None else None,
            thumbnail.filename if thumbnail is not None else None)
        return json_response(ManualSchema.from_model(manual), 201)


@blp.route('/<manual_id>', methods=['GET', 'PUT', 'DELETE'])
def manual(manual_id: str) -> Response:
    """
    Return, update, or delete a manual

    GET /oe_manuals/[id]
        - return a single manual with the given ID

    PUT /oe_manuals/[id]?videoLink=...&title=...&description=...&order=...
        - update manual; all fields are required; an optional new thumbnail
          replaces the existing one

    DELETE /oe_manuals/[id]
        - delete the given manual and its thumbnail

    :param manual_id: manual ID

    :return: JSON-serialized manual; for DELETE, the manual that was removed
    """
    catalog = get_catalog()

    if request.method == 'GET':
        # Return specific manual
        return json_response(ManualSchema.from_model(catalog.get(manual_id)))

    if request.method == 'PUT':
        # Update manual
        thumbnail = get_thumbnail()
        return mutation_response(catalog.update(
            manual_id, ManualSchema.input_fields(request.args),
            thumbnail.stream if thumbnail is not None else None,
            thumbnail.filename if thumbnail is not None else None))

    if request.method == 'DELETE':
        # Delete manual
        return mutation_response(catalog.delete(manual_id))
