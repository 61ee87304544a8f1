"""
FastAPI routers grouped by domain.

Each module exposes an APIRouter included by ``webook.app.create_app``.
"""
