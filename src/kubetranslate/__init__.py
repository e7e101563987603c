"""kubetranslate: turn an application IR into versioned cluster manifests."""

__version__ = "0.3.0"
