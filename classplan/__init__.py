"""
Weekly class schedule drafts and conflict detection.
"""
