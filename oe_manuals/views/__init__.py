"""
OE Manuals: subpackage containing all Flask app routes
"""

from flask import Flask

__all__ = ['register']


def register(app: Flask) -> None:
    """
    Register endpoints

    :param app: Flask application
    """
    from .manuals import register
    register(app)

    from .uploads import register
    register(app)
