#!/usr/bin/env python

"""
OE Manuals catalog maintenance
"""

import sys
import argparse
from pprint import PrettyPrinter


if __name__ == '__main__':
    pp = PrettyPrinter()
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:

{0} list
  - list all manuals sorted by display order

{0} orphans
  - list thumbnails that are not referenced by any manual

{0} purge --min-age 86400
  - remove unreferenced thumbnails written more than a day ago

Uses the same configuration as the server (OE_MANUALS_CONFIG environment
variable).
'''.format(sys.argv[0]))

    parser.add_argument(
        'command', metavar='CMD', choices=['list', 'orphans', 'purge'],
        help='admin command (list, orphans, or purge)')
    parser.add_argument(
        '-d', '--data-root', metavar='PATH',
        help='override DATA_ROOT from the configuration')
    parser.add_argument(
        '-a', '--min-age', metavar='SECONDS', type=float, default=3600,
        help='only consider thumbnails older than this (default: 3600)')

    args = parser.parse_args()

    from oe_manuals import create_app
    from oe_manuals.resources import get_catalog

    app = create_app({'DATA_ROOT': args.data_root} if args.data_root else None)
    with app.app_context():
        catalog = get_catalog()
        try:
            if args.command == 'list':
                pp.pprint(sorted(
                    (m.to_dict() for m in catalog.query()),
                    key=lambda m: m['order']))
            elif args.command == 'orphans':
                pp.pprint(catalog.find_orphans(args.min_age))
            elif args.command == 'purge':
                removed = catalog.purge_orphans(args.min_age)
                print('Removed {:d} thumbnail(s)'.format(len(removed)))
                pp.pprint(removed)
        finally:
            catalog.close()
