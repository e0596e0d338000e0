"""Reviews app package.

Verified reviews left by travelers on completed bookings, the helpful vote
toggle, agent responses and admin moderation.
"""
