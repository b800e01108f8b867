# Custom exceptions for unitresolve

class UnitResolveError(Exception):
    """Base exception for all application-specific errors."""
    pass


class NoPackageError(UnitResolveError):
    """Raised when no non-ITV package encloses a file."""
    def __init__(self, uri: str, policy=None):
        self.uri = uri
        self.policy = policy
        super().__init__(f"no package metadata for file {uri}")


class InternalConsistencyError(UnitResolveError):
    """
    Raised when a type-checked package does not contain a file that its
    metadata lists as a member.

    This signals a defect in the snapshot or in candidate selection,
    never an ordinary "file not tracked" condition.
    """
    def __init__(self, uri: str, package_id: str, policy=None, cause: Exception = None):
        self.uri = uri
        self.package_id = package_id
        self.policy = policy
        self.cause = cause
        message = f"package {package_id} does not contain its member file {uri}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class AnalysisError(UnitResolveError):
    """Raised by a snapshot when a package cannot be type-checked."""
    def __init__(self, package_id: str, message: str):
        self.package_id = package_id
        self.message = message
        super().__init__(f"type-checking {package_id}: {message}")


class FileNotInPackageError(UnitResolveError):
    """Raised by Package.file for a URI the package does not own."""
    def __init__(self, uri: str, package_id: str):
        self.uri = uri
        self.package_id = package_id
        super().__init__(f"no parsed file for {uri} in package {package_id}")


class ConfigError(UnitResolveError):
    """Raised for configuration-related problems."""
    pass
