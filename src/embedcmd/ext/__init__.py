"""
Bundled command extensions.

Every module in this package whose name is a command name provides the
handler for that command, e.g. ``dt`` for ``%dt(...)%``.
"""
