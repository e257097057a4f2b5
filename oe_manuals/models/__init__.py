"""
OE Manuals: object data models

OE Manuals object data model is a customized marshmallow self-serializable
schema subclassing from :class:`oe_manuals.schemas.ManualsSchema`. Such models
have a predefined set of typed fields and can be deserialized (loaded) from
another object or a dictionary of field-value pairs and serialized to
a dictionary.

Manuals correspond to an underlying database object defined in
:mod:`oe_manuals.resources.catalog_store`. The conversion between the layers is
done as follows:

      Conversion                       Code                          Module
Database -> Data Model     obj = Object(db_obj)                   resources
Data Model -> API          schema = ObjectSchema.from_model(obj)  views
API -> Data Model          fields = ObjectSchema.input_fields()   views
Data Model -> Database     db_obj = DbObject(**obj.to_dict())     resources
"""

from .manuals import *
