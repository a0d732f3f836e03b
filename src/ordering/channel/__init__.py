"""Channel catalogue factory.

Provides get_catalog() / set_catalog() to swap implementations:
- RepositoryChannelCatalog, reading persisted distributors and order cycles
- InMemoryChannelCatalog for tests that declare membership directly
"""

from ordering.channel.port import ChannelCatalog

_current_catalog: ChannelCatalog | None = None


def get_catalog() -> ChannelCatalog:
    """Return the current channel catalogue. Defaults to the repository-backed one."""
    global _current_catalog
    if _current_catalog is None:
        from ordering.channel.repository_adapter import RepositoryChannelCatalog

        _current_catalog = RepositoryChannelCatalog()
    return _current_catalog


def set_catalog(catalog: ChannelCatalog) -> None:
    """Override the active channel catalogue (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to the default catalogue."""
    global _current_catalog
    _current_catalog = None
