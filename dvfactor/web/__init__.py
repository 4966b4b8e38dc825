"""Web-facing helpers shared by the routers."""
