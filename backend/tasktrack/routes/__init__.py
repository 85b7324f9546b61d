# Routes package init
"""
TaskTrack Backend - API Routes Package
======================================

Route Inventory:
    - accounts.py:  POST /register, POST /login
    - tasks.py:     GET/POST /tasks/{user_id}, DELETE/PATCH /tasks/{task_id}
    - health.py:    GET  /health

Routes stay thin: read the request, call the service, return the model.
Errors are raised as exceptions and formatted by the handlers in main.py.
"""
