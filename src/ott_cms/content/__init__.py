from .app import create_app
from .artifacts import FileArtifactManager
from .config import CmsConfig
from .pipeline import MutationPipeline
from .validation import validate_payload

__all__ = [
    "create_app",
    "CmsConfig",
    "FileArtifactManager",
    "MutationPipeline",
    "validate_payload",
]
