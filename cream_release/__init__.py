from .config import ReleaseConfig
from .errors import (
    ArtifactMissingError,
    ManifestError,
    PublishError,
    RegistryError,
    ReleaseEnvironmentError,
    ReleaseError,
    TypingsRewriteError,
    UnsupportedMajorError,
    UnsupportedTargetError,
    UserDeclinedError,
)
from .matrix import TARGETS, TargetDescriptor
from .release import run_release
from .transaction import PublishTransaction, ReleaseContext, TxState
from .versions import GateDecision, UpstreamRelease, check_release

__version__ = "1.0.0"

__all__ = [
    "ArtifactMissingError",
    "GateDecision",
    "ManifestError",
    "PublishError",
    "PublishTransaction",
    "RegistryError",
    "ReleaseConfig",
    "ReleaseContext",
    "ReleaseEnvironmentError",
    "ReleaseError",
    "TARGETS",
    "TargetDescriptor",
    "TxState",
    "TypingsRewriteError",
    "UnsupportedMajorError",
    "UnsupportedTargetError",
    "UpstreamRelease",
    "UserDeclinedError",
    "check_release",
    "run_release",
]
