import os
import pytest
from werkzeug.datastructures import FileStorage

from conftest import photo
from cesi.extensions import db
from cesi.models import Tutor
from cesi.services.storage import stored_uploads, save_file, delete_file, absolute_path, TUTORS_FOLDER


def _upload(filename="foto.png"):
    stream, name = photo(filename=filename)
    return FileStorage(stream=stream, filename=name, content_type="image/png")


def test_save_file_uses_unique_secure_names(app):
    with app.app_context():
        first = save_file(_upload("../mi foto.png"), TUTORS_FOLDER)
        second = save_file(_upload("../mi foto.png"), TUTORS_FOLDER)

        assert first != second
        assert first.startswith("tutores/")
        assert first.endswith("_mi_foto.png")
        assert os.path.exists(absolute_path(first))


def test_failed_block_removes_stored_files(app):
    with app.app_context():
        written = []
        with pytest.raises(ValueError):
            with stored_uploads() as uploads:
                written.append(uploads.store(_upload(), TUTORS_FOLDER))
                written.append(uploads.store_bytes(b"%PDF-1.4", "reportes", "r.pdf"))
                raise ValueError("commit failed")

        assert len(written) == 2
        assert not any(os.path.exists(absolute_path(p)) for p in written)


def test_successful_block_keeps_files(app):
    with app.app_context():
        with stored_uploads() as uploads:
            path = uploads.store(_upload(), TUTORS_FOLDER)
        assert os.path.exists(absolute_path(path))


def test_delete_file_reports_missing(app):
    with app.app_context():
        assert delete_file(None) is False
        assert delete_file("tutores/no-existe.png") is False

        path = save_file(_upload(), TUTORS_FOLDER)
        assert delete_file(path) is True
        assert delete_file(path) is False


def test_uploads_are_served_to_authenticated_clients(app, client, school_setup, admin_headers):
    with app.app_context():
        path = save_file(_upload(), TUTORS_FOLDER)
        db.session.get(Tutor, school_setup["tutor_id"]).photo = path
        db.session.commit()

    assert app.test_client().get(f"/uploads/{path}").status_code == 401
    r = client.get(f"/uploads/{path}", headers=admin_headers)
    assert r.status_code == 200
    assert r.data.startswith(b"\x89PNG")
    assert client.get("/uploads/../config.py", headers=admin_headers).status_code == 404


def test_unreferenced_uploads_are_not_served(app, client, school_setup, admin_headers):
    with app.app_context():
        path = save_file(_upload(), TUTORS_FOLDER)
        assert os.path.exists(absolute_path(path))

    assert client.get(f"/uploads/{path}", headers=admin_headers).status_code == 404
