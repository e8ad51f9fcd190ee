"""
TeenLife Hours Backend — Authentication Boundary
==================================================

Bearer-token verification only. Login, registration and password handling
live in the auth service that issues the tokens; this package checks the
signature and hands the routes the caller's user id.
"""
