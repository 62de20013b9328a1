"""HTTP layer: FastAPI app, routers, auth and settings."""
