"""Flask CLI commands for admin operations."""
import click
from flask import current_app


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables and the private blob directory."""
        from imagestore.extensions import db, init_blob_root

        db.create_all()
        init_blob_root(current_app)
        click.echo(f"Database initialized, blobs under {current_app.config['BLOB_ROOT']}.")

    @app.cli.command("create-user")
    @click.option("--name", required=True)
    @click.option("--email", required=True)
    @click.option("--password", required=True, prompt=True, hide_input=True)
    def create_user(name, email, password):
        """Create an account directly."""
        from imagestore.errors import ValidationFailed
        from imagestore.services.user_service import register_user

        try:
            user = register_user(name, email, password)
        except ValidationFailed as e:
            for field, messages in e.errors.items():
                for message in messages:
                    click.echo(f"{field}: {message}", err=True)
            raise SystemExit(1)
        click.echo(f"Created user {user.id}: {user.email}")

    @app.cli.command("stats")
    def stats():
        """Show image counts per owner and blob usage."""
        from imagestore.services import blob_store
        from imagestore.services.image_service import get_stats

        s = get_stats()
        click.echo(f"Total images: {sum(s.values())}")
        for email, count in sorted(s.items()):
            click.echo(f"  {email}: {count}")
        click.echo(f"Blob bytes: {blob_store.total_size()}")

    @app.cli.command("check-storage")
    def check_storage():
        """Report records without blobs and blobs without records."""
        from imagestore.services.image_service import find_inconsistencies

        missing_blobs, orphan_blobs = find_inconsistencies()
        for image_id in missing_blobs:
            click.echo(f"record without blob: {image_id}")
        for key in orphan_blobs:
            click.echo(f"blob without record: {key}")
        if missing_blobs or orphan_blobs:
            raise SystemExit(1)
        click.echo("Storage is consistent.")
