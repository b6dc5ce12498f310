"""
passvault credential vault

THREAT MODEL AND LIMITATIONS:
Entries are stored as plaintext lines ("resource => password") in an
owner-only file. Nothing is encrypted. Confidentiality relies on filesystem
permissions (700 directory, 600 files) and on the master key prompt that
every invocation must pass. Anyone able to read the files as the owner (or
as an administrator) can read every password, including the master key.
No file locking is done, so concurrent invocations may overwrite each
other's changes.
"""

from .config import APP_VERSION as __version__
