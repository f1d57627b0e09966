"""
XBRL extraction errors

Per-element defects inside a document are skipped, never raised.
Only archive-level and document-level failures surface as exceptions.
"""


class XbrlError(Exception):
    """Base class for extraction failures of a single filing"""


class ArchiveFormatError(XbrlError):
    """The archive is not a ZIP file or holds no XBRL document"""


class MalformedDocumentError(XbrlError):
    """The located XBRL document is not well-formed XML"""
