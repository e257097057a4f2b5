#!/usr/bin/env python

if __name__ in ('__main__', 'start_oe_manuals'):
    # Running in dev environment
    from oe_manuals import create_app
    from oe_manuals.resources import get_catalog

    app = create_app()
    try:
        app.run(threaded=True, use_reloader=False)
    finally:
        with app.app_context():
            get_catalog().close()
