"""Owner-only image routes."""
from flask import redirect, request, send_file, url_for

from imagestore.auth import current_user_id, login_required
from imagestore.blueprints.images import images_bp
from imagestore.services import image_service
from imagestore.services.upload_validation import validate_upload


@images_bp.route("", methods=["GET"])
@login_required
def index():
    images = image_service.list_images(current_user_id())
    return {"images": [image.to_listing() for image in images]}


@images_bp.route("", methods=["POST"])
@login_required
def store():
    name, file = validate_upload(request.form.get("name"), request.files.get("image"))
    image_service.upload_image(current_user_id(), name, file)
    return redirect(url_for("images.index"), code=303)


@images_bp.route("/<image_id>", methods=["GET"])
@login_required
def show(image_id):
    # Non-owners get 404 so they cannot probe which ids exist.
    image, stream, mimetype = image_service.open_image(current_user_id(), image_id)
    return send_file(stream, mimetype=mimetype, download_name=image.blob_key)


@images_bp.route("/<image_id>", methods=["DELETE"])
@login_required
def destroy(image_id):
    # Unlike show, a non-owner gets an explicit 403 here.
    image_service.delete_image(current_user_id(), image_id)
    return redirect(url_for("images.index"), code=303)
