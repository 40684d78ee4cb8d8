"""
Cloudinary service for UpSkillNow
Handles student profile images, one folder per student
"""

import logging
from typing import Any, BinaryIO, Dict, Iterable, Optional

import cloudinary
import cloudinary.api
import cloudinary.uploader

from upskillnow.core.config import settings

logger = logging.getLogger(__name__)


def student_folder(user_id: int) -> str:
    return f"students/{user_id}"


class CloudinaryService:
    """Cloudinary service for media uploads"""

    def __init__(self):
        """Initialize Cloudinary configuration"""
        if settings.cloudinary_configured():
            cloudinary.config(
                cloud_name=settings.CLOUDINARY_CLOUD_NAME,
                api_key=settings.CLOUDINARY_API_KEY,
                api_secret=settings.CLOUDINARY_API_SECRET,
                secure=True,
            )
            self.is_configured = True
            logger.info("Cloudinary configured successfully")
        else:
            self.is_configured = False
            logger.warning("Cloudinary not configured - missing credentials")

    def upload_image(
        self, file: BinaryIO, folder: str, public_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Upload image to Cloudinary

        Args:
            file: Open binary file or file-like object
            folder: Cloudinary folder name
            public_id: Optional custom public ID

        Returns:
            Upload result dict or None if failed
        """
        if not self.is_configured:
            logger.warning("Cloudinary not configured, skipping upload")
            return None

        try:
            result = cloudinary.uploader.upload(
                file,
                folder=folder,
                public_id=public_id,
                overwrite=True,
                invalidate=True,
                resource_type="image",
                transformation=[{"quality": "auto:good"}, {"fetch_format": "auto"}],
            )
            logger.info(f"Image uploaded successfully: {result.get('public_id')}")
            return result
        except Exception as e:
            logger.error(f"Failed to upload image: {e}")
            return None

    def upload_profile_image(self, file: BinaryIO, user_id: int) -> Optional[str]:
        """
        Upload a student's profile image, replacing any previous one

        Returns:
            Secure URL or None
        """
        result = self.upload_image(file, folder=student_folder(user_id), public_id="profile")
        return result.get("secure_url") if result else None

    def delete_student_folder(self, user_id: int) -> bool:
        """
        Remove every asset of a student and then the folder itself

        Returns:
            True if the folder is gone
        """
        if not self.is_configured:
            return False

        folder = student_folder(user_id)
        try:
            cloudinary.api.delete_resources_by_prefix(f"{folder}/")
            cloudinary.api.delete_folder(folder)
            logger.info(f"Deleted Cloudinary folder {folder}")
            return True
        except Exception as e:
            # A student who never uploaded anything has no folder
            logger.warning(f"Failed to delete Cloudinary folder {folder}: {e}")
            return False

    def delete_student_folders(self, user_ids: Iterable[int]) -> int:
        return sum(1 for user_id in user_ids if self.delete_student_folder(user_id))


# Global service instance
cloudinary_service = CloudinaryService()


def get_storage() -> CloudinaryService:
    """Dependency returning the media storage service"""
    return cloudinary_service
