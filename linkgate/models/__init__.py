from .audit import AuditLog
from .download_link import DownloadLink

__all__ = [
    "AuditLog",
    "DownloadLink",
]
