"""CLI tools for booking platform administration."""

import click

from . import models  # noqa: F401 - registers tables on Base
from .database import Base, SessionLocal, engine
from .domain.categories.service import CategoryService
from .domain.identity.service import IdentityService
from .errors import BookingError


@click.group()
def cli():
    """Sewa Booking CLI tools."""
    pass


@cli.command()
@click.option("--email", required=True, help="Admin email address")
@click.option("--name", required=True, help="Display name")
@click.option("--password", required=True, prompt=True, hide_input=True, confirmation_prompt=True)
def create_admin(email: str, name: str, password: str):
    """
    Create an admin account.

    Admins cannot register through the API; this is the bootstrap command.

    Example:
        python -m app.cli create-admin --email admin@example.com --name "Ops"
    """
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        if len(password) < 6:
            click.echo("❌ Password must be at least 6 characters")
            return
        user = IdentityService(db).create_admin(email.strip().lower(), name.strip(), password)
        click.echo(f"✓ Created admin: {user.email}")
        click.echo(f"  ID: {user.id}")
    except BookingError as e:
        db.rollback()
        click.echo(f"❌ Error: {e.message}")
    finally:
        db.close()


@cli.command()
def seed_categories():
    """
    Insert or refresh the service category catalog and recompute provider counts.

    Safe to run repeatedly.
    """
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        service = CategoryService(db)
        created = service.seed()
        counts = service.recompute_counts()
        click.echo(f"✓ Seeded categories ({created} new, {len(counts)} total)")
    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    cli()
