from .base import check_response, created_id
from .chunked_upload import ChunkedUploadSession, ResumableChunkedUpload
from .direct_reference import DirectReferenceProtocol
from .register_upload import RegisterUploadProtocol, UploadSlot
from .staged_media import StagedMediaProtocol, StagedMediaSet

__all__ = [
    "ChunkedUploadSession",
    "DirectReferenceProtocol",
    "RegisterUploadProtocol",
    "ResumableChunkedUpload",
    "StagedMediaProtocol",
    "StagedMediaSet",
    "UploadSlot",
    "check_response",
    "created_id",
]
