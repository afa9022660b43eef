"""Tests for admin CLI commands."""
from conftest import upload_file
from imagestore.services import blob_store, image_service


def test_create_user_and_stats(app):
    runner = app.test_cli_runner()
    result = runner.invoke(
        args=["create-user", "--name", "Admin", "--email", "admin@example.com",
              "--password", "correct-horse"]
    )
    assert result.exit_code == 0
    assert "admin@example.com" in result.output

    result = runner.invoke(args=["stats"])
    assert result.exit_code == 0
    assert "Total images: 0" in result.output


def test_create_user_reports_validation_errors(app):
    runner = app.test_cli_runner()
    result = runner.invoke(
        args=["create-user", "--name", "Admin", "--email", "bad", "--password", "x"]
    )
    assert result.exit_code == 1


def test_check_storage(app, users):
    owner_id, _ = users
    runner = app.test_cli_runner()

    with app.app_context():
        image_service.upload_image(owner_id, "Cat", upload_file())
    result = runner.invoke(args=["check-storage"])
    assert result.exit_code == 0
    assert "consistent" in result.output

    with app.app_context():
        blob_store.write("stray.png", upload_file().stream)
    result = runner.invoke(args=["check-storage"])
    assert result.exit_code == 1
    assert "blob without record: stray.png" in result.output


def test_init_db(app):
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code == 0
    assert "Database initialized" in result.output
