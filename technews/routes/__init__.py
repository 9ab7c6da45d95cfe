"""
Tech News Backend — API Routes Package
=======================================

What:  HTTP route handlers, composed into one `/api` router.
How:   Each module owns one resource; `api_router` mounts them under /api.
       The health check is mounted separately at the root.

Route Inventory:
    - users.py:     /api/users     (signup, login, logout, CRUD)
    - posts.py:     /api/posts     (feed, CRUD, upvote)
    - comments.py:  /api/comments  (list, create, delete)
    - health.py:    /health

Routes stay thin: extract request data, call a service, shape the
response. Business rules live in technews/services.
"""

from fastapi import APIRouter

from technews.routes import comments, posts, users

api_router = APIRouter(prefix="/api")
api_router.include_router(users.router)
api_router.include_router(posts.router)
api_router.include_router(comments.router)
