"""
db/ - Database Layer
====================
Connection registry, the DBConnection wrapper around psycopg2, and the
debug-instrumented query helpers. This layer is the lowest in the
architecture and depends only on config, exceptions and utils.
"""
