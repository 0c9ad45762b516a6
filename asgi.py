"""
asgi.py -- Application assembly for the test server.

The module-level app is what uvicorn serves. It is built from Settings alone:
the TestServer itself is created by the lifespan on startup (with the default
fixture unless TESTSERVER_SEED_DEFAULTS=false).

Run with:  uvicorn asgi:app --reload
           python main.py
"""

from api.main import create_app

app = create_app()
