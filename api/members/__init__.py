"""
Team members: listing, creation and partial updates.
"""
