"""Exception hierarchy shared by every gateway_fixtures module."""


class Error(Exception): pass


class Exhausted(Error):
    """The random source has no more draws to give.

    Raised by drivers and propagated untouched through every generator; the
    public ``produce`` entry points turn it into ``None``.
    """
