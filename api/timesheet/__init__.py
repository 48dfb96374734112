"""
Time entries: weekly view per member and save (insert-or-update).
"""
