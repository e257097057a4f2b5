"""
OE Manuals: error system
"""

import sys
import json
import traceback
from typing import Optional

from flask import Flask, Response, request
from werkzeug import exceptions
from werkzeug.http import HTTP_STATUS_CODES


__all__ = [
    'ManualsError', 'ValidationError', 'MissingFieldError', 'NotFoundError',
    'ConflictError', 'StorageError',
    'register',
]


exc_classes = {}


def register(app: Flask) -> None:
    """
    Install app error handlers

    :param app: Flask application
    """
    # Install standard HTTP error handlers
    app.register_error_handler(404, http_error_handler)
    app.register_error_handler(405, http_error_handler)
    app.register_error_handler(413, http_error_handler)
    app.register_error_handler(500, internal_server_error_handler)

    # Install error handlers for all defined exceptions
    for c in exc_classes.values():
        app.register_error_handler(c, manuals_error_handler)


def error_response(status: int, error: dict,
                   headers: Optional[dict] = None) -> Response:
    """
    Wrap error description in a JSON envelope

    :param status: HTTP status code
    :param error: error description
    :param headers: optional extra HTTP headers

    :return: JSON response object
    """
    return Response(
        json.dumps({
            'error': error,
            'links': {'self': request.url},
        }), status, mimetype='application/json', headers=headers)


def manuals_error_handler(e: Exception) -> Response:
    """
    Error handling function for all OE Manuals errors

    Automatically installed for all `ManualsError` subclasses via
    `ManualsErrorMeta`

    :param e: exception instance

    :return: JSON response object
    """
    status = int(getattr(e, 'code', 400))

    error = {
        'status': HTTP_STATUS_CODES.get(
            status, '{} Unknown Error'.format(status)),
        'id': str(getattr(e, 'id', e.__class__.__name__)),
        'detail': str(e) or e.__class__.__name__,
    }

    meta = getattr(e, 'meta', None)
    if meta:
        error['meta'] = dict(meta)

    return error_response(
        status, error, headers=dict(getattr(e, 'headers', None) or []))


def http_error_handler(e: exceptions.HTTPException) -> Response:
    """
    Error handling function for non-OE Manuals HTTP errors, e.g. 404 (NOT
    FOUND) raised by the router when no route matches

    :param e: exception instance

    :return: JSON response object
    """
    status = int(getattr(e, 'code', None) or 500)
    return error_response(status, {
        'status': HTTP_STATUS_CODES.get(
            status, '{} Unknown Error'.format(status)),
        'id': e.__class__.__name__,
        'detail': str(e) or e.__class__.__name__,
    })


def internal_server_error_handler(e: Exception) -> Response:
    """
    Error handling function for HTTP 500 (INTERNAL SERVER ERROR) errors

    :param e: exception instance; for unhandled exceptions, Flask passes
        :class:`werkzeug.exceptions.InternalServerError` with the original
        exception attached

    :return: JSON response object
    """
    orig = getattr(e, 'original_exception', None) or e
    etb = orig.__traceback__ or sys.exc_info()[-1]
    return error_response(500, {
        'status': HTTP_STATUS_CODES[500],
        'id': orig.__class__.__name__,
        'detail': str(orig) or orig.__class__.__name__,
        'meta': {
            'type': orig.__class__.__name__,
            'value': str(orig),
            'traceback': traceback.format_tb(etb),
        },
    })


class ManualsErrorMeta(type):
    """
    Metaclass for class:`ManualsError`; needed to automatically install error
    handler for each exception subclassing from `ManualsError`, since Flask
    does not intercept subclassed exceptions in the base exception class
    handler
    """
    def __new__(mcs, *args, **kwargs):
        c = type.__new__(mcs, *args, **kwargs)
        exc_classes[c.__name__] = c
        return c


class ManualsError(exceptions.HTTPException, metaclass=ManualsErrorMeta):
    """
    Base class for all OE Manuals exceptions

    :Attributes::
        code: HTTP status code for the exception, defaults to 400 (BAD REQUEST)
        id: unique string error code, e.g. exception class name
        meta: dictionary containing the optional exception attributes passed
            as keyword arguments when raising the exception and sent to the
            client in JSON
        headers: any additional HTTP headers to send
    """
    code = 400  # HTTP status code
    id: str = None  # error code
    meta: dict = None  # additional error data
    message: str = None  # error message

    def __init__(self, **kwargs):
        """
        Create an OE Manuals exception instance

        :param kwargs: optional extra data sent to the client in the body of
            the error response
        """
        super().__init__()
        if self.id is None:
            self.id = self.__class__.__name__
        if not self.description and self.__doc__:
            self.description = self.__doc__
        self.meta = kwargs

    def __str__(self) -> str:
        """
        Return a string representation of an error showing both error message
        and payload

        :return: stringified error
        """
        msg = self.message or self.__class__.__name__
        if self.meta:
            msg += ' ({})'.format(
                ', '.join('{}={}'.format(name, val)
                          for name, val in self.meta.items()))
        return msg


class ValidationError(ManualsError):
    """
    Server-side validation fails for a certain field passed as a request
    parameter

    Extra attributes::
        field: name of the field
    """
    message = 'Validation failed'

    def __init__(self, field: str, message: Optional[str] = None,
                 code: Optional[int] = 400):
        super().__init__(field=field)
        if message:
            self.message = message
        self.code = code


class MissingFieldError(ValidationError):
    """
    Required data is missing from request parameters

    Extra attributes::
        field: name of the field
    """
    message = 'Missing required data'


class NotFoundError(ManualsError):
    """
    Operation targets a nonexistent object
    """
    code = 404
    message = 'Not found'


class ConflictError(ManualsError):
    """
    Operation would violate a uniqueness constraint
    """
    code = 409
    message = 'Conflict'


class StorageError(ManualsError):
    """
    Underlying record or asset persistence failed; not retried automatically

    Extra attributes::
        reason: error message describing the reason why the operation
            has failed
    """
    code = 500
    message = 'Storage failure'
