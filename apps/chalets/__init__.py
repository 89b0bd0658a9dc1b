"""Chalets app package.

Minimal chalet catalog used by the booking engine: identity, localized
titles, owner and nightly price. The booking core reads it only through
the directory service in :mod:`apps.chalets.directory`.
"""
