"""Tests for database models."""
from imagestore.models.image import Image, blob_key_for
from imagestore.models.user import User


def test_blob_key_is_derived_from_id_and_extension():
    assert blob_key_for("abc", "png") == "abc.png"
    image = Image(id="1234", user_id=1, name="x", extension="webp")
    assert image.blob_key == "1234.webp"


def test_access_path_is_derived_from_id(app):
    with app.test_request_context():
        image = Image(id="1234", user_id=1, name="x", extension="webp")
        assert image.path == "/images/1234"


def test_user_password_hashing(db):
    user = User(name="Hash", email="hash@example.com")
    user.set_password("s3cret-pass")
    db.session.add(user)
    db.session.flush()

    assert user.id is not None
    assert user.check_password("s3cret-pass")
    assert not user.check_password("wrong")


def test_image_belongs_to_owner(db, users):
    owner_id, _ = users
    image = Image(id="5678", user_id=owner_id, name="Owned", extension="png")
    db.session.add(image)
    db.session.flush()

    assert image.owner.email == "owner@example.com"
    assert image.created_at is not None
