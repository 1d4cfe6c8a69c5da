"""Category registry - seeded catalog with derived provider counts"""
