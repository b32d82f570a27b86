class ReleaseError(Exception):
    """Base class for every failure that stops a release run."""


class ReleaseEnvironmentError(ReleaseError):
    pass


class ManifestError(ReleaseError):
    pass


class RegistryError(ReleaseError):
    pass


class UnsupportedMajorError(ReleaseError):
    pass


class UserDeclinedError(ReleaseError):
    pass


class UnsupportedTargetError(ReleaseError):
    pass


class ArtifactMissingError(ReleaseError):
    pass


class TypingsRewriteError(ReleaseError):
    pass


class PublishError(ReleaseError):
    pass
