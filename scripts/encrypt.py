#!/usr/bin/env python

"""
Encrypt console input, e.g. the database password (DB_PASS)

Must be run in the OE Manuals data directory (DATA_ROOT) or pass the directory
containing OE_MANUALS_KEY on the command line
"""

import os
import sys
from base64 import urlsafe_b64encode

from cryptography.fernet import Fernet


if __name__ == '__main__':
    try:
        path = sys.argv[1]
    except IndexError:
        path = '.'
    with open(os.path.join(path, 'OE_MANUALS_KEY'), 'rb') as f:
        key = f.read()
    cipher = Fernet(urlsafe_b64encode(key + b'OEManual'))
    print(cipher.encrypt(input().encode('utf8')).decode('ascii'))
