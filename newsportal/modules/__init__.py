"""
News Portal Modules
===================

Feature blueprints: ``auth``, ``articles`` (admin) and ``news_public``.
"""
