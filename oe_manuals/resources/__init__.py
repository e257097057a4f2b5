"""
OE Manuals: package containing the manual catalog and its storage backends
"""

from .asset_store import *
from .catalog_store import *
from .manuals import *
