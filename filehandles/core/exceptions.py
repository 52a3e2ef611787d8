from typing import Optional, Dict, Any
from pydantic import BaseModel


class ErrorReport(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class FilesError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)

    def to_error_report(self) -> ErrorReport:
        return ErrorReport(
            code=self.code,
            message=self.message,
            details=self.details
        )


class FileTypeUnresolvedError(FilesError):
    def __init__(self, path: str, details: Optional[Dict[str, Any]] = None):
        self.path = path
        super().__init__(
            code="FILES-404",
            message=f"Cannot determine the file type of {path}",
            details=details
        )


class UnsupportedOperationError(FilesError):
    def __init__(self, message: str = "Operation not supported", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code="FILES-405",
            message=message,
            details=details
        )


class ClosedHandleError(FilesError):
    def __init__(self, path: str, details: Optional[Dict[str, Any]] = None):
        self.path = path
        super().__init__(
            code="FILES-409",
            message=f"Handle on {path} is closed",
            details=details
        )


class BrokenLinkError(FilesError):
    def __init__(self, path: str, details: Optional[Dict[str, Any]] = None):
        self.path = path
        super().__init__(
            code="FILES-410",
            message=f"Link {path} does not resolve to an existing file",
            details=details
        )


class UnsupportedFileTypeError(FilesError):
    def __init__(self, file_type: str, details: Optional[Dict[str, Any]] = None):
        self.file_type = file_type
        super().__init__(
            code="FILES-415",
            message=f"Unsupported file type: {file_type}",
            details=details
        )


class SymlinkLoopError(FilesError):
    def __init__(self, path: str, details: Optional[Dict[str, Any]] = None):
        self.path = path
        super().__init__(
            code="FILES-508",
            message=f"Too many levels of symbolic links resolving {path}",
            details=details
        )


ERROR_CODES = {
    "FILES-404": "Unresolved - Nothing can be inspected at the path, so its type is unknown",
    "FILES-405": "Unsupported Operation - The file type does not support this operation",
    "FILES-409": "Closed - The handle was used after it was closed",
    "FILES-410": "Broken Link - The link target does not exist",
    "FILES-415": "Unsupported Type - No wrapper class exists for this file type",
    "FILES-508": "Loop - Symbolic link resolution revisited a link or went too deep"
}
