"""
Administration CLI for the dashboard service.
"""
