"""
OE Manuals: main app package
"""

import datetime
import json
import os
import errno
import gzip
import shutil
from logging import Formatter, getLogger
from logging.handlers import TimedRotatingFileHandler
from base64 import urlsafe_b64encode
from typing import Any, Dict as TDict, List as TList, Optional, Union

from flask_cors import CORS
from marshmallow import missing
from werkzeug.datastructures import CombinedMultiDict, MultiDict
from werkzeug.exceptions import BadRequest, UnsupportedMediaType
from flask import Flask, Response, request
from cryptography.fernet import Fernet

from .schemas import ManualsSchema


__all__ = ['create_app', 'init_cipher', 'json_response', 'main']


class ManualsSchemaEncoder(json.JSONEncoder):
    """
    JSON encoder that can serialize ManualsSchema class instances and datetime
    objects
    """

    def default(self, obj):
        if isinstance(obj, type(missing)):
            return None
        if isinstance(obj, ManualsSchema):
            return obj.dump(obj)
        if isinstance(obj, datetime.datetime):
            return obj.isoformat(' ')
        return super().default(obj)


def json_response(data: Optional[Union[str, dict, ManualsSchema, TList[dict],
                                       TList[ManualsSchema]]] = None,
                  status_code: Optional[int] = None,
                  headers: Optional[TDict[str, str]] = None,
                  meta: Optional[TDict[str, Any]] = None) -> Response:
    """
    Serialize a Python object to a JSON-type flask.Response

    :param data: object(s) to serialize; can be a :class:`ManualsSchema`
        instance or a dict, a list of those, or None
    :param int status_code: optional HTTP status code; defaults to 200 - OK
    :param dict headers: optional extra HTTP headers
    :param meta: optional non-standard information about the request
        outcome, included in the envelope as is

    :return: Flask response object with mimetype set to application/json
    """
    envelope = {
        'data': data,
        'links': {'self': request.url},
    }
    if meta:
        envelope['meta'] = meta
    return Response(
        json.dumps(envelope, cls=ManualsSchemaEncoder),
        status_code or 200, mimetype='application/json', headers=headers)


class MaxLengthFormatter(Formatter):
    """
    Log formatter that cuts out the middle of messages longer than
    `max_length` characters, keeping both the head and the tail
    """
    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None,
                 max_length: int = 1000, filler: str = ' [...] ',
                 min_partial: int = 20):
        super().__init__(fmt, datefmt)
        self.filler = filler
        # Leave room for at least `min_partial` characters of the message
        self.max_length = max(max_length, len(filler) + max(min_partial, 1))
        kept = self.max_length - len(filler)
        self._head = kept//2
        self._tail = kept - self._head

    def format(self, record):
        msg = super().format(record)
        if len(msg) > self.max_length:
            msg = msg[:self._head] + self.filler + msg[len(msg) - self._tail:]
        return msg


class ManualsLogHandler(TimedRotatingFileHandler):
    """
    Daily log file that is rotated only after it has grown past `max_bytes`;
    rotated files are gzipped
    """
    def __init__(self, filename: str, max_bytes: int = 1 << 20, **kwargs):
        super().__init__(filename, **kwargs)
        self.max_bytes = max_bytes
        self.setFormatter(MaxLengthFormatter(
            '%(asctime)s %(levelname)-8s %(message)s'))

    def shouldRollover(self, record) -> bool:
        if not super().shouldRollover(record):
            return False
        try:
            size = os.path.getsize(self.baseFilename)
        except OSError:
            size = 0
        return size >= self.max_bytes

    @staticmethod
    def namer(name: str) -> str:
        return name + '.gz'

    @staticmethod
    def rotator(source: str, dest: str) -> None:
        with open(source, 'rb') as f_in, gzip.open(dest, 'wb') as f_out:
            shutil.copyfileobj(f_in, f_out)
        os.remove(source)


def init_logging(app: Flask) -> None:
    """
    Set up app logging; a rotating log file is written only if the log
    directory is configured

    :param app: Flask application
    """
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    log_root = app.config.get('LOG_ROOT') or \
        os.environ.get('OE_MANUALS_LOGGING_ROOT')
    if not log_root:
        return

    try:
        os.makedirs(log_root)
    except OSError as e:
        if e.errno != errno.EEXIST:
            raise
    filename = os.path.abspath(os.path.join(log_root, 'oe_manuals.log'))

    logger = getLogger()
    logger.setLevel('INFO')
    if not any(getattr(h, 'baseFilename', None) == filename
               for h in logger.handlers):
        logger.addHandler(ManualsLogHandler(
            filename,
            when='D',
            backupCount=10,
            max_bytes=1 << 20,
            encoding='utf8'))


def init_cipher(app: Flask) -> Fernet:
    """
    Read or create the secret key stored in the data directory; set the app
    secret key and return the cipher used to decrypt config secrets

    :param app: Flask application

    :return: Fernet cipher instance
    """
    keyfile = os.path.join(
        os.path.abspath(os.path.expanduser(app.config['DATA_ROOT'])),
        'OE_MANUALS_KEY')
    try:
        with open(keyfile, 'rb') as f:
            key = f.read()
    except IOError:
        key = os.urandom(24)
        d = os.path.dirname(keyfile)
        if os.path.isfile(d):
            os.remove(d)
        try:
            os.makedirs(d)
        except OSError as _e:
            if _e.errno != errno.EEXIST:
                raise
        with open(keyfile, 'wb') as f:
            f.write(key)
    app.config['SECRET_KEY'] = key
    # Fernet requires 32-byte key
    return Fernet(urlsafe_b64encode(key + b'OEManual'))


def create_app(config: Optional[TDict[str, Any]] = None) -> Flask:
    """
    Flask app factory

    Opens the manual catalog, which is then available via
    :func:`oe_manuals.resources.get_catalog` within the app context; call
    `get_catalog().close()` within the app context on shutdown.

    :param config: optional config values overriding the defaults and
        the files referenced by the OE_MANUALS_CONFIG and OE_MANUALS_SECRETS
        environment variables

    :return: Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object('oe_manuals.default_cfg')
    app.config.from_envvar('OE_MANUALS_CONFIG', silent=True)
    app.config.from_envvar('OE_MANUALS_SECRETS', silent=True)
    if config:
        app.config.update(config)

    init_logging(app)

    CORS(app, origins=app.config.get('CORS_ORIGINS', '*'))

    proxy_count = app.config.get('APP_PROXY')
    if proxy_count:
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(
            app.wsgi_app, x_for=proxy_count, x_proto=proxy_count,
            x_host=proxy_count, x_port=proxy_count, x_prefix=proxy_count)

    @app.before_request
    def resolve_request_body() -> None:
        """
        Before every request, combine `request.form` and `request.get_json()`
        into `request.args`
        """
        ds = [request.args, request.form]

        try:
            body = request.get_json()
        except (BadRequest, UnsupportedMediaType):
            # No JSON
            pass
        else:
            if isinstance(body, dict) and body:
                ds.append(MultiDict(body.items()))

        # Replace immutable Request.args with the combined args dict
        # noinspection PyPropertyAccess
        request.args = CombinedMultiDict(ds)

    from .database import db, init_db
    init_db(app, init_cipher(app))

    from .resources import AssetStore, CatalogManager, CatalogStore
    from .resources.manuals import EXTENSION_NAME
    thumbnail_root = app.config.get('THUMBNAIL_ROOT') or os.path.join(
        app.config['DATA_ROOT'], 'uploads')
    catalog = CatalogManager(CatalogStore(db), AssetStore(thumbnail_root))
    app.extensions[EXTENSION_NAME] = catalog

    with app.app_context():
        catalog.open()

        # Register endpoints
        from .views import register
        register(app)

        # Install Flask handlers for all OE Manuals exceptions
        from .errors import register
        register(app)

    app.logger.info(
        'Manual catalog opened: %s, thumbnails in %s',
        app.config['SQLALCHEMY_DATABASE_URI'].split('@')[-1],
        catalog.assets.root)

    return app


def main(global_config: Optional[TDict[str, Any]] = None,
         **settings) -> Flask:
    """
    Paste app factory entry point

    :param global_config: Paste global config, unused
    :param settings: config values overriding the defaults

    :return: Flask application instance
    """
    return create_app({key.upper(): value for key, value in settings.items()})
