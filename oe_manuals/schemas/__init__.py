"""
OE Manuals: custom marshmallow schemas for API objects
"""

from typing import Any, Dict as TDict, Optional, Set, Sequence, Union

from marshmallow import Schema, fields, missing, post_dump


__all__ = ['ManualsSchema']


class ManualsSchema(Schema):
    """
    A :class:`marshmallow.Schema` subclass that allows initialization from an
    object or keyword arguments and optionally assigns default values to all
    uninitialized fields. Serves as a self-contained schema that can both hold
    field values and dump itself to a dict or a JSON string.

    schema = MySchema(field1=value1, ...)
        or
    schema = MySchema(object)
    """
    _remove_nulls = False  # remove null-valued fields on dump

    def __init__(self, _obj: Any = None,
                 only: Optional[Union[Sequence[str], Set[str]]] = None,
                 exclude: Union[Sequence[str], Set[str]] = (),
                 _set_defaults: bool = False, _remove_nulls: bool = False,
                 **kwargs):
        """
        Create a schema class instance

        :param _obj: initialize fields from the given object (usually a data
            model object defined in :mod:`oe_manuals.models` or an SQLA
            database object defined in :mod:`oe_manuals.resources`)
        :param only: whitelist of the fields to include in the instantiated
            schema
        :param exclude: blacklist of the fields to exclude
            from the instantiated schema
        :param _set_defaults: initialize fields missing from both `_obj` and
            keyword arguments to their defaults, if any, and dump all fields
        :param _remove_nulls: if set, don't dump fields with null values
        :param kwargs: keyword arguments are assigned to the corresponding
            instance attributes, including fields
        """
        self._remove_nulls = _remove_nulls
        super().__init__(partial=True, only=only, exclude=exclude)

        if _obj is None:
            kw = kwargs
        else:
            kw = dict(self.dump(_obj).items())
            kw.update(kwargs)

        if not _set_defaults:
            # Don't serialize fields that have not been explicitly set
            self.dump_fields = self.dict_class()

        for name, val in kw.items():
            setattr(self, name, val)

        if _set_defaults:
            # Initialize the missing fields with their defaults
            for name, f in self.fields.items():
                if not hasattr(self, name) and f.dump_default is not missing:
                    setattr(self, name, f.dump_default)

    def __setattr__(self, name: str, value: Any) -> None:
        """
        Deserialize fields on assignment

        :param name: attribute name
        :param value: attribute value
        """
        if value is not None:
            try:
                field = self.fields[name]
            except (AttributeError, KeyError):
                pass
            else:
                if not field.load_only:
                    # Include field in serialization
                    self.dump_fields[name] = field
                if isinstance(field, fields.String) and \
                        not isinstance(value, str):
                    value = str(value)
                value = field.deserialize(value)
        super().__setattr__(name, value)

    @post_dump
    def remove_nones(self, data: TDict[str, Any], **__) -> TDict[str, Any]:
        """
        Don't dump None-valued fields

        :param data: serialized schema

        :return: input data with None-valued fields stripped
        """
        if self._remove_nulls:
            return {key: value for key, value in data.items()
                    if value is not None}
        return data

    def to_dict(self) -> TDict[str, Any]:
        """
        Serialize schema instance to dictionary

        :return: dictionary containing all explicitly set fields
        """
        return self.dump(self)

    def json(self) -> str:
        """
        Serialize schema instance to JSON

        :return: JSON string containing all explicitly set fields
        """
        return self.dumps(self)
