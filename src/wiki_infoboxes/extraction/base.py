# ABOUTME: Base exception shared by the acquisition, parsing and persistence layers
# ABOUTME: Transport failures are not exceptions here, the API client reports them as None


class WikiInfoboxesError(Exception):
    """Base class for errors raised by wiki-infoboxes."""

    pass
