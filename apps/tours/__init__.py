"""Tours app package.

Tour catalog owned by agents: public browsing, the agent's own catalog
management and admin moderation.
"""
