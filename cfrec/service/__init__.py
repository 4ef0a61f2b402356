"""HTTP boundary: FastAPI app, request pipeline and schemas."""
