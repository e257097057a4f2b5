"""
OE Manuals: API v1 schemas
"""

from .manual import *
