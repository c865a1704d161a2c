"""Config: load, cache, snapshot and write ``~/.openclaw/openclaw.json``.

Reads warn once per distinct ``meta.lastTouchedVersion`` that is newer than
the running release.
"""
