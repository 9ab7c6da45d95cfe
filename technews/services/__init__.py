"""
Tech News Backend — Services Layer
===================================

What:  Business logic layer sitting between routes (HTTP) and the database.
How:   Services receive the request's AsyncSession, run ORM queries, and
       return response schemas or raise typed exceptions. Commit and
       rollback stay with `get_db_session`.

Service Inventory:
    - SessionService: server-side cookie sessions (load, authenticate, destroy)
    - UserService:    users CRUD and credential checks
    - PostService:    feed, posts CRUD and upvotes
    - CommentService: comments list, create, delete
"""
