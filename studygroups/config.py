"""
Study group application settings.

Extends the base settings with group-formation configuration.
"""

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Study-group-specific settings."""

    # ==========================================================================
    # Profile Store
    # ==========================================================================
    USERS_COLLECTION: str = "users"

    # Upper bound on any single store call, in seconds
    STORE_TIMEOUT_SECONDS: float = 5.0

    # ==========================================================================
    # Registration
    # ==========================================================================
    BCRYPT_ROUNDS: int = 12

    # ==========================================================================
    # Group Formation
    # ==========================================================================
    # "exact" (same availability set) or "superset" (has at least these days free)
    GROUP_MATCH_MODE: str = "exact"

    # Buckets smaller than this are left for a later pass
    MIN_GROUP_SIZE: int = 1

    def validate_required(self) -> None:
        """
        Validate base settings plus group-formation settings.

        Raises:
            ValueError: If any setting is invalid
        """
        super().validate_required()

        errors = []

        if self.STORE_TIMEOUT_SECONDS <= 0:
            errors.append("STORE_TIMEOUT_SECONDS must be positive")

        if self.GROUP_MATCH_MODE not in ("exact", "superset"):
            errors.append("GROUP_MATCH_MODE must be 'exact' or 'superset'")

        if self.MIN_GROUP_SIZE < 1:
            errors.append("MIN_GROUP_SIZE must be at least 1")

        if not 4 <= self.BCRYPT_ROUNDS <= 31:
            errors.append("BCRYPT_ROUNDS must be between 4 and 31")

        if errors:
            raise ValueError("Configuration errors:\n- " + "\n- ".join(errors))


# Global settings instance
settings = Settings()
