"""
Inkpost Backend — API Routes Package
=====================================

What:  HTTP route handlers. Every router is mounted under settings.api_prefix.

Route Inventory:
    - auth.py:        /auth/register, /auth/login, /auth/me
    - users.py:       /users, /users/{id}, /users/username/{username},
                      /users/{id}/change-password
    - posts.py:       /posts, /posts/{slug}, /posts/{id}
    - categories.py:  /categories, /categories/{id}
    - tags.py:        /tags, /tags/popular, /tags/{id}
    - comments.py:    /comments, /comments/reply, /comments/post/{postId},
                      /comments/user/{userId}, /comments/{id}, /comments/{id}/replies
    - health.py:      /health

Routes stay thin: parse the request, declare guards, call one service
method. Business rules live in inkpost.services.
"""
