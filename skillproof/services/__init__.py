"""
Domain operations. Every function takes an explicit SQLAlchemy session.
"""
