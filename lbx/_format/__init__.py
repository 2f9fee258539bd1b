"""
Internal container format engine for LBX archives.

The container is a fixed-layout binary header followed by an offset table;
image archives additionally carry a 32-byte name/comment record per entry.
This is an internal dependency — use ``lbx.archive.LBXFile`` as the public
entry point.
"""

from lbx._format.spec import ContainerType, SIGNATURE, read_u16, read_u32
from lbx._format.sanitize import SanitizeTable, is_printable, sanitize
from lbx._format.document import LBXContainer, LBXEntry
from lbx._format.reader import LBXReader, LBXFormatError, LBXSignatureError, LBXTruncatedError
