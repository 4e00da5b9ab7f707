from .file_service import FileService, PartialTrashError
from .listing import ConsoleSink, MemorySink, entry_directory, entry_path
from .process_runner import SubprocessHandle, SubprocessRunner

__all__ = [
    "FileService",
    "PartialTrashError",
    "ConsoleSink",
    "MemorySink",
    "entry_directory",
    "entry_path",
    "SubprocessHandle",
    "SubprocessRunner",
]
