"""auth/ -- Identity, session and request-authorization package.

Layer rule: auth/ imports only core/, jobs.models and third-party libraries
(auth/dependencies.py additionally imports server for the TestServer type).
It does NOT import from api/ or jobs.engine.
api/ and server import from auth/, not the other way around.
"""
