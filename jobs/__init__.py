"""jobs/ -- Access catalog and the challenge-driven job engine.

Layer rule: jobs/ imports from core/ and auth.store only.
It does NOT import from api/ or server.
"""
