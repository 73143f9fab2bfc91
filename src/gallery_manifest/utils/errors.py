"""Fatal errors raised while building a gallery manifest."""


class GalleryError(RuntimeError):
    """Base class for errors that abort a manifest build."""


class DiscoveryError(GalleryError):
    """The media root, or a directory below it, could not be walked."""


class SerializationError(GalleryError):
    """The manifest could not be written to its output path."""
