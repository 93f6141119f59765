"""Importing wallpaper images and their thumbnails into the data directory."""

import logging
import shutil
import time
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError


logger = logging.getLogger(__name__)

THUMB_SUFFIX = "_th"


class ImageLibrary:
    """Owns the copies of wallpaper images referenced by rules."""

    def __init__(self, image_dir: Path, thumbnail_size: Tuple[int, int] = (256, 256)):
        """
        Initialize image library.

        Args:
            image_dir: Directory holding imported images
            thumbnail_size: (width, height) of generated thumbnails
        """
        self.image_dir = Path(image_dir)
        self.thumbnail_size = thumbnail_size

    def path_for(self, filename: str) -> Path:
        """Full path of an imported image."""
        return self.image_dir / filename

    def thumbnail_path(self, filename: str) -> Path:
        """Full path of the thumbnail for an imported image."""
        return self.image_dir / f"{Path(filename).stem}{THUMB_SUFFIX}.jpg"

    def _unique_filename(self, suffix: str) -> str:
        stamp = int(time.time())
        filename = f"{stamp}{suffix}"
        while self.path_for(filename).exists():
            stamp += 1
            filename = f"{stamp}{suffix}"
        return filename

    def import_image(self, source: Path) -> str:
        """
        Copy an image into the library and create its thumbnail.

        Args:
            source: Image chosen by the user

        Returns:
            Filename to store in the rule

        Raises:
            FileNotFoundError: If the source does not exist
            ValueError: If the source is not a readable image
        """
        source = Path(source)
        if not source.is_file():
            raise FileNotFoundError(f"Image not found: {source}")

        try:
            # verify() skips pixel data, so decode the whole image
            with Image.open(source) as img:
                img.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ValueError(f"Not a readable image: {source} ({e})") from e

        self.image_dir.mkdir(parents=True, exist_ok=True)
        filename = self._unique_filename(source.suffix.lower())
        target = self.path_for(filename)
        shutil.copyfile(source, target)
        logger.debug(f"Copied {source} -> {target}")

        try:
            self.create_thumbnail(filename)
        except OSError as e:
            self.delete(filename)
            raise ValueError(f"Not a readable image: {source} ({e})") from e

        logger.info(f"Imported image {source.name} as {filename}")
        return filename

    def create_thumbnail(self, filename: str) -> Path:
        """Write a centre-cropped JPEG thumbnail for an imported image."""
        thumb_path = self.thumbnail_path(filename)
        with Image.open(self.path_for(filename)) as img:
            thumb = ImageOps.fit(
                img.convert('RGB'),
                self.thumbnail_size,
                Image.Resampling.LANCZOS
            )
        thumb.save(thumb_path, "JPEG", quality=95)
        return thumb_path

    def delete(self, filename: Optional[str]) -> None:
        """Remove an imported image and its thumbnail, if present."""
        if not filename:
            return
        for path in (self.path_for(filename), self.thumbnail_path(filename)):
            if path.exists():
                path.unlink()
                logger.debug(f"Deleted {path}")
