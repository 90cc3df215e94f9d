"""HTTP layer: FastAPI routers and error mapping."""
