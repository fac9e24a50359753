import os
import uuid
from contextlib import contextmanager
from flask import current_app, send_from_directory
from werkzeug.utils import secure_filename

TUTORS_FOLDER = "tutores"
TEACHERS_FOLDER = "maestros"
GUARDIANS_FOLDER = "responsables"
SCHOOLS_FOLDER = "escuelas"
REPORTS_FOLDER = "reportes"


def upload_root():
    return current_app.config.get("UPLOAD_FOLDER", "static/uploads")


def absolute_path(relative_path):
    return os.path.join(upload_root(), relative_path)


def save_file(file, folder):
    """Writes an uploaded file under ``folder`` and returns its relative path."""
    filename = secure_filename(file.filename) or "archivo"
    unique_filename = f"{uuid.uuid4().hex}_{filename}"
    target_folder = os.path.join(upload_root(), folder)
    os.makedirs(target_folder, exist_ok=True)
    file.stream.seek(0)
    file.save(os.path.join(target_folder, unique_filename))
    return f"{folder}/{unique_filename}"


def save_bytes(content, folder, filename):
    target_folder = os.path.join(upload_root(), folder)
    os.makedirs(target_folder, exist_ok=True)
    unique_filename = f"{uuid.uuid4().hex}_{secure_filename(filename)}"
    with open(os.path.join(target_folder, unique_filename), "wb") as fh:
        fh.write(content)
    return f"{folder}/{unique_filename}"


def delete_file(relative_path):
    """Removes a stored file. Returns False when there was nothing to remove."""
    if not relative_path:
        return False
    path = absolute_path(relative_path)
    if not os.path.exists(path):
        return False
    try:
        os.remove(path)
    except OSError as e:
        current_app.logger.warning("Could not remove stored file %s: %s", path, e)
        return False
    return True


def serve_file(relative_path, **kwargs):
    return send_from_directory(os.path.abspath(upload_root()), relative_path, **kwargs)


class UploadBatch:
    """Files written during one unit of work."""

    def __init__(self):
        self.written = []

    def store(self, file, folder):
        path = save_file(file, folder)
        self.written.append(path)
        return path

    def store_bytes(self, content, folder, filename):
        path = save_bytes(content, folder, filename)
        self.written.append(path)
        return path

    def discard(self):
        for path in self.written:
            current_app.logger.info("Removing %s after failed commit", path)
            delete_file(path)
        self.written = []


@contextmanager
def stored_uploads():
    """
    Yields an UploadBatch. Files stored through it are deleted again if the
    block raises, so a failed commit leaves no orphaned files.
    """
    batch = UploadBatch()
    try:
        yield batch
    except Exception:
        batch.discard()
        raise
