"""
StudyShare Application Package.

- backend/: FastAPI application, services, persistence, configuration
- frontend/: Jinja2 templates rendered by the page routes
"""
