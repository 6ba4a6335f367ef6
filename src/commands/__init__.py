"""Commands package for the bot.

Every module here that defines a module-level `command` (built with the
classes in `framework`) is discovered and registered at startup.
"""
