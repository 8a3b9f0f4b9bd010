"""
Package: codewars_bot

A Slack bot that tracks Codewars users, reports their statistics on demand and
posts a weekly digest.
"""
__version__ = "0.2.0"
