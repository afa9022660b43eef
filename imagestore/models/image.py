from datetime import datetime, timezone
from flask import url_for
from imagestore.extensions import db


def blob_key_for(image_id, extension):
    """Name under which an image's bytes live in the blob store."""
    return f"{image_id}.{extension}"


def access_path_for(image_id):
    """URL a client uses to fetch the bytes through the show route."""
    return url_for("images.show", image_id=image_id)


class Image(db.Model):
    __tablename__ = "images"

    id = db.Column(db.String(36), primary_key=True)  # uuid4, also the blob key stem
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(40), nullable=False)
    extension = db.Column(db.String(10), nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    NAME_MAX_LENGTH = 40

    @property
    def blob_key(self):
        return blob_key_for(self.id, self.extension)

    @property
    def path(self):
        return access_path_for(self.id)

    def to_listing(self):
        """Projection used by the list view; never touches the blob."""
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Image {self.blob_key} owner={self.user_id}>"
