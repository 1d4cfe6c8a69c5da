"""Identity domain - principals, registration and login"""
