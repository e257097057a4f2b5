"""
OE Manuals: manual API schema
"""

from typing import Any, Dict as TDict, Mapping, Optional

from flask import url_for
from marshmallow.fields import Integer, String

from ... import ManualsSchema
from ....models import Manual


__all__ = ['ManualSchema']


class ManualSchema(ManualsSchema):
    """
    Manual as seen by API clients; `thumbnailPath` is the public path
    the thumbnail is served from or None if the manual has no thumbnail
    """
    # API field name -> data model field name
    __model_fields__ = {
        'id': 'id',
        'videoLink': 'video_link',
        'title': 'title',
        'description': 'description',
        'order': 'order',
    }

    id: int = Integer()
    videoLink: str = String()
    title: str = String()
    description: str = String()
    order: int = Integer()
    thumbnailPath: Optional[str] = String(dump_default=None)

    @classmethod
    def from_model(cls, manual: Manual) -> 'ManualSchema':
        """
        Create manual API schema from data model object; must be called within
        a request context

        :param manual: manual data model object

        :return: serializable manual schema
        """
        kw = {api_name: getattr(manual, name, None)
              for api_name, name in cls.__model_fields__.items()}
        asset_ref = getattr(manual, 'thumbnail', None)
        if asset_ref:
            kw['thumbnailPath'] = url_for(
                'uploads.thumbnail', asset_ref=asset_ref)
        return cls(_set_defaults=True, **kw)

    @classmethod
    def input_fields(cls, args: Mapping[str, Any]) -> TDict[str, Any]:
        """
        Extract raw manual fields from request parameters

        :param args: request parameters using API field names

        :return: field values keyed by data model field names; fields missing
            from `args` are omitted; the ID is never taken from the request
        """
        return {name: args.get(api_name)
                for api_name, name in cls.__model_fields__.items()
                if api_name != 'id' and api_name in args}
