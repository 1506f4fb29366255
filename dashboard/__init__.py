"""
Personal dashboard service: account API plus scheduled third-party integrations.
"""
__version__ = "0.3.0"
