"""
Projects: listing, creation and partial updates.
"""
