class GhsnapError(Exception):
    pass


class ListLoadError(GhsnapError):
    """the repo list file cannot be read"""


class ProgressLogParseError(GhsnapError):
    """a line of the progress log is not a valid record"""


class MalformedIdentifier(GhsnapError):
    """identifier is not of the form `org/project`"""


class MetadataFetchError(GhsnapError):
    pass


class ArchiveFetchError(GhsnapError):
    pass
