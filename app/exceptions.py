"""
ReplayVault - Custom Exceptions
"""
import structlog

logger = structlog.get_logger('exceptions')


class ReplayVaultException(Exception):
    """Base exception for ReplayVault"""
    def __init__(self, message: str, code: str = "REPLAYVAULT_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self):
        return {
            'error': True,
            'code': self.code,
            'message': self.message
        }


class DatabaseException(ReplayVaultException):
    """Database-related exceptions"""
    def __init__(self, message: str):
        super().__init__(message, code="DATABASE_ERROR")
        logger.error(f"Database error: {message}")


class FileException(ReplayVaultException):
    """File store exceptions"""
    def __init__(self, message: str, code: str = "FILE_ERROR"):
        super().__init__(message, code=code)
        logger.error(f"File error: {message}")


class ArtifactNotFoundException(FileException):
    """A replay file reference points at nothing"""
    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Replay file not found: {reference}", code="ARTIFACT_NOT_FOUND")


class ValidationException(ReplayVaultException):
    """Validation-related exceptions"""
    def __init__(self, message: str, errors=None, code: str = "VALIDATION_ERROR"):
        super().__init__(message, code=code)
        self.errors = errors or []
        logger.warning(f"Validation error: {message}")

    def to_dict(self):
        data = super().to_dict()
        data['errors'] = self.errors
        return data


class UploadLimitException(ValidationException):
    """User exceeded the weekly upload allowance"""
    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(
            f"Upload limit reached: {limit} replays per week",
            errors=[{"field": "user_id", "error": "weekly upload limit reached"}],
            code="UPLOAD_LIMIT",
        )


class NotFoundException(ReplayVaultException):
    """Referenced record does not exist"""
    def __init__(self, message: str):
        super().__init__(message, code="NOT_FOUND")
        logger.warning(f"Not found: {message}")


class ExtractionException(ReplayVaultException):
    """Replay metadata could not be read. Never leaves metadata_service."""
    def __init__(self, message: str):
        super().__init__(message, code="EXTRACTION_ERROR")
