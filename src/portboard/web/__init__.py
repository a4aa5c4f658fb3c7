"""Web package - Local FastAPI surface for portboard."""
