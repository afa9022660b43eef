import io
import pytest
from PIL import Image as PILImage
from werkzeug.datastructures import FileStorage

from imagestore import create_app
from imagestore.extensions import db as _db
from imagestore.models.user import User


@pytest.fixture
def app(tmp_path):
    """Create an application backed by a throwaway database and blob root."""
    app = create_app(
        "testing",
        {
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
            "BLOB_ROOT": str(tmp_path / "private"),
        },
    )
    with app.app_context():
        _db.create_all()
    yield app
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    """Database handle inside an app context, for service-level tests."""
    with app.app_context():
        yield _db
        _db.session.remove()


def make_user(email, name="Tester"):
    user = User(name=name, email=email)
    user.set_password("correct-horse")
    _db.session.add(user)
    _db.session.commit()
    return user.id


@pytest.fixture
def users(app):
    """Two account ids: the owner and somebody else."""
    with app.app_context():
        return make_user("owner@example.com"), make_user("other@example.com")


def png_bytes(color="red"):
    buffer = io.BytesIO()
    PILImage.new("RGB", (4, 4), color).save(buffer, format="PNG")
    return buffer.getvalue()


def upload_file(data=None, filename="photo.png", content_type="image/png"):
    return FileStorage(
        stream=io.BytesIO(png_bytes() if data is None else data),
        filename=filename,
        content_type=content_type,
    )


def login(client, user_id):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
