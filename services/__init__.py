"""
services/ - Database Services
=============================
``DatabaseService`` and the domain services built on it. Each domain
package binds one logical database name and keeps its SQL here.
"""
