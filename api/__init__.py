"""HTTP routers, dependencies and the FastAPI application."""
