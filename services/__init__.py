"""
Edge function gateway, response normalization and the Notion service facade.
"""
