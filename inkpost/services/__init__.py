"""
Inkpost Backend — Services Layer
=================================

What:  Business rules between the routes (HTTP) and the ORM (persistence).
How:   One stateless class per entity with a module-level singleton. Every
       method receives the request's AsyncSession; services flush, the
       session dependency commits.

Service Inventory:
    - AuthService:      register, login, current user
    - UserService:      profiles with counts, updates, password, deletion
    - PostService:      CRUD, filtered listing, detail with view counter
    - CategoryService:  CRUD with post counts
    - TagService:       CRUD, sorted listing, popular tags
    - CommentService:   threaded comments, listings, soft/hard delete

Services raise inkpost.exceptions types; main.py turns them into
responses.
"""
