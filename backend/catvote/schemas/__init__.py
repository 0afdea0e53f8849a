"""API contracts (Pydantic) shared by the server routes and the client."""
