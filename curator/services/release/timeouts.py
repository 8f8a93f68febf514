from __future__ import annotations

# Local git operations (add, commit)
GIT_TIMEOUT_SECONDS = 30.0

# Network-bound git operations (push)
GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

# Plan engine, validator and bundler invocations
ENGINE_TIMEOUT_SECONDS = 60 * 60.0

# Publish HTTP requests; bundles and doc tarballs can be large.
UPLOAD_TIMEOUT_SECONDS = 30 * 60.0
