"""UI Composer - micro-frontend composition gateway.

Assembles a single HTML page from a base template and a registry of
independently deployed micro-frontends, then streams the merged document
to browsers.

Architecture:
- Registry and template are loaded once at startup (SSM Parameter Store, S3)
- Each request composes the page from the cached pair, no per-request I/O
- Fail-fast startup: the server never listens without a valid template

Version: 1.0.0
"""

__version__ = "1.0.0"
