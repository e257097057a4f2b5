# Default OE Manuals Configuration

###############################################################################
# General
###############################################################################

# Location of the general OE Manuals data files: database, secret key
DATA_ROOT = '.'

# Number of reverse proxies in front of the app; enables
# werkzeug.middleware.proxy_fix.ProxyFix if set
APP_PROXY = 0

# Allowed CORS origins for all routes
CORS_ORIGINS = '*'

# Directory to write oe_manuals.log to; the OE_MANUALS_LOGGING_ROOT environment
# variable is used if not set; no log file is written if neither is set
LOG_ROOT = None


###############################################################################
# Database engine options
###############################################################################

# Database backend: "sqlite", "mysql", "mysql+mysqldb", etc.; see
# https://docs.sqlalchemy.org/en/20/core/engines.html
# Default is 'sqlite', which stores the catalog in DATA_ROOT/oe_manuals.db and
# requires no further configuration
DB_BACKEND = 'sqlite'

# For non-sqlite backends, this is the database server address
DB_HOST = 'localhost'
DB_PORT = 3306

# Database server username/password
DB_USER = 'oe_manuals'
# Password must be encrypted using scripts/encrypt.py
DB_PASS = ''

# Database schema containing all OE Manuals tables
DB_SCHEMA = 'oe_manuals'

# Database connection/pool timeout in seconds
DB_TIMEOUT = 30

# Max number of db connections; set to at least the number of WSGI threads
DB_POOL_SIZE = 10


###############################################################################
# Thumbnail options
###############################################################################

# Root directory for thumbnail storage; defaults to DATA_ROOT/uploads
THUMBNAIL_ROOT = None

# Public URL prefix thumbnails are served from
ASSET_URL_PREFIX = '/uploads'

# Maximum request size in bytes, including the thumbnail
MAX_CONTENT_LENGTH = 16 << 20
