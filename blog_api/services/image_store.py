"""
Local image storage for blog posts.
Stores uploaded files in the public upload directory as {image_name}{ext}
and keeps them named after the post's image_name on update.
"""
import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)


class ImageStore:
    """
    Files live flat in upload_dir and are published as
    {url_prefix}/{filename}. A post's image column always holds such a
    public path, or "" when the post has no image.
    """

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads", default_name: str = "default"):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.default_name = default_name

    def ensure_directory(self) -> Path:
        """Create the upload directory (and parents) if missing."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        return self.upload_dir

    def base_name(self, image_name: Optional[str]) -> str:
        """
        Base filename for image_name.
        Only the last path component is kept so names cannot leave upload_dir.
        """
        if image_name:
            name = Path(str(image_name).replace("\\", "/")).name
            if name and name not in (".", ".."):
                return name
        return self.default_name

    def filename_for(self, image_name: Optional[str], original_filename: Optional[str]) -> str:
        """Build {base}{ext} using the extension of original_filename."""
        extension = os.path.splitext(original_filename or "")[1]
        return f"{self.base_name(image_name)}{extension}"

    def exists(self, image_name: Optional[str], original_filename: Optional[str]) -> bool:
        """Whether save() with these arguments would overwrite a file."""
        return (self.upload_dir / self.filename_for(image_name, original_filename)).exists()

    def public_path(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"

    def local_path(self, public_path: Optional[str]) -> Optional[Path]:
        """
        Map a stored public path back to its file on disk.

        Returns:
            Path inside upload_dir, or None for empty or foreign paths
        """
        if not public_path:
            return None
        prefix = self.url_prefix + "/"
        if not public_path.startswith(prefix):
            logger.warning(f"Image path outside {prefix}: {public_path}")
            return None
        filename = Path(public_path[len(prefix):]).name
        if not filename:
            return None
        return self.upload_dir / filename

    def save(self, fileobj: BinaryIO, image_name: Optional[str], original_filename: Optional[str]) -> str:
        """
        Write an uploaded file into the upload directory.

        Args:
            fileobj: Readable binary file (e.g. UploadFile.file)
            image_name: User-chosen base name, falls back to default_name
            original_filename: Client filename, used for its extension

        Returns:
            str: Public path of the stored file

        Raises:
            OSError: If the file cannot be written
        """
        filename = self.filename_for(image_name, original_filename)
        destination = self.upload_dir / filename

        if destination.exists():
            logger.warning(f"Overwriting existing image {destination}")

        fileobj.seek(0)
        with open(destination, "wb") as out:
            shutil.copyfileobj(fileobj, out)

        logger.info(f"Stored image {destination}")
        return self.public_path(filename)

    def replace(
        self,
        old_public_path: Optional[str],
        fileobj: BinaryIO,
        image_name: Optional[str],
        original_filename: Optional[str],
    ) -> str:
        """
        Store a new upload and remove the file it supersedes.
        The old file is kept when it resolves to the same path as the new one.

        Returns:
            str: Public path of the new file
        """
        new_public_path = self.save(fileobj, image_name, original_filename)

        old_file = self.local_path(old_public_path)
        new_file = self.local_path(new_public_path)
        if old_file is not None and old_file != new_file:
            self.delete(old_public_path)

        return new_public_path

    def rename(self, old_public_path: Optional[str], image_name: Optional[str]) -> str:
        """
        Rename an existing file to image_name, keeping its extension.

        Returns:
            str: The new public path, the unchanged path when nothing has to
            move, or "" when the source file is missing

        Raises:
            OSError: If the rename itself fails
        """
        old_file = self.local_path(old_public_path)
        if old_file is None:
            return old_public_path or ""

        filename = self.filename_for(image_name, old_file.name)
        new_file = self.upload_dir / filename
        if new_file == old_file:
            return old_public_path

        if not old_file.exists():
            # Row points at a file that is gone; drop the reference instead of failing the update
            logger.warning(f"Cannot rename missing image {old_file} to {new_file}, clearing reference")
            return ""

        if new_file.exists():
            logger.warning(f"Rename target {new_file} already exists and will be overwritten")
        os.replace(old_file, new_file)
        logger.info(f"Renamed image {old_file} -> {new_file}")
        return self.public_path(filename)

    def delete(self, public_path: Optional[str]) -> bool:
        """
        Remove a stored file. A missing file is logged and skipped.

        Returns:
            bool: True if a file was removed
        """
        path = self.local_path(public_path)
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"Image already gone, skipping delete: {path}")
            return False
        logger.info(f"Deleted image {path}")
        return True
