"""Admin domain - provider approval, user management and dashboard stats"""
