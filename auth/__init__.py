"""auth/ -- Credential, session-token, and authorization package for BountyBoard.

Layer rule: auth/ imports only stdlib + third-party libraries + core/.
It does NOT import from api/ or store/.
api/ imports from auth/, not the other way around.
"""
