"""Chat app package.

Conversations between travelers and tour operators, delivered in real
time over private pub/sub channels.
"""
