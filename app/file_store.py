"""
Local disk storage for uploaded replay files
"""

import os
import shutil
import uuid
import logging
from werkzeug.utils import secure_filename
from exceptions import FileException, ArtifactNotFoundException

# Retrieve main logger
logger = logging.getLogger("main")


class LocalFileStore:
    """
    Stores each replay under <root>/<token>/<filename>.
    References are the path relative to root.
    """

    def __init__(self, root):
        self.root = os.path.abspath(root)

    def _path_for(self, reference):
        path = os.path.abspath(os.path.join(self.root, reference))
        if os.path.commonpath([self.root, path]) != self.root:
            raise FileException(f"Reference escapes the storage root: {reference}")
        return path

    def store(self, filename, data):
        """Write data to a new location and return its reference"""
        safe_name = secure_filename(filename or "") or "replay.SC2Replay"
        reference = f"{uuid.uuid4().hex}/{safe_name}"
        path = self._path_for(reference)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise FileException(f"Could not store {safe_name}: {e}")
        logger.debug(f"Stored replay file {reference} ({len(data)} bytes)")
        return reference

    def read(self, reference):
        """Return the bytes behind reference"""
        path = self._path_for(reference)
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            raise ArtifactNotFoundException(reference)
        except OSError as e:
            raise FileException(f"Could not read {reference}: {e}")

    def delete(self, reference):
        """Remove a stored file. Returns False when there was nothing to remove."""
        path = self._path_for(reference)
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.debug(f"Replay file {reference} already gone")
            return False
        except OSError as e:
            raise FileException(f"Could not delete {reference}: {e}")

        # Drop the per-upload directory once empty
        folder = os.path.dirname(path)
        if folder != self.root and not os.listdir(folder):
            shutil.rmtree(folder, ignore_errors=True)
        return True

    def exists(self, reference):
        return os.path.isfile(self._path_for(reference))
