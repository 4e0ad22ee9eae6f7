"""
User signup/login, password hashing and signed bearer tokens.
"""
