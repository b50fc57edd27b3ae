"""
Batch Scripts
Command line jobs run against the product database.
"""
