"""
Command line interface to notes in a hosted repository.
"""
