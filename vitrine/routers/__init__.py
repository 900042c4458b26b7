"""
FastAPI routers grouped by domain (auth, articles, fond).

Each module exposes an APIRouter included by create_app().
"""
