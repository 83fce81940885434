"""
Infrastructure layer - External integrations.

This layer contains the logging adapter, component discovery, the metadata
cache, the properties reader and integrations with external frameworks and
tools. Submodules are imported explicitly, e.g.
``from stratus_di.infrastructure.discovery import PackageScanner``, because
the FastAPI integration needs an optional dependency.
"""
