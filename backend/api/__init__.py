"""
Teamdesk API package.

The FastAPI application lives in api.app; import it from there so that
module routers can import api.dependencies without a cycle.
"""
