# Services package init
"""
TaskTrack Backend - Services Layer
==================================

Service Inventory:
    - PersistenceGateway: CRUD over users and tasks (one per request/session)
    - AccountService:     register / login rules
    - TaskService:        list / create / delete / update-state rules
"""
