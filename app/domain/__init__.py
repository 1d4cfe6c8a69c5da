"""
Domain packages.

Each area follows the same split:
- repository.py: database queries
- service.py: business rules, raises app.errors exceptions
- schemas.py: request/response models
- router.py: FastAPI endpoints
"""
