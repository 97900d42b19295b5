"""WSGI entry point."""

import os

import click

from flowlingo import create_app, db

app = create_app(os.environ.get("FLASK_ENV", "production"))

with app.app_context():
    db.create_all()


@app.cli.command("regenerate-hearts")
def regenerate_hearts_command():
    """Apply pending heart regeneration for every user."""
    from flowlingo.services.heart_service import HeartService

    updated = HeartService().regenerate_all()
    click.echo(f"Hearts regenerated for {updated} user(s)")


@app.cli.command("seed-vocabulary")
@click.argument("email")
def seed_vocabulary_command(email):
    """Add the starter deck to the account with EMAIL."""
    from flowlingo.models import User
    from flowlingo.services.vocabulary_service import VocabularyService

    user = User.query.filter_by(email=email.lower()).first()
    if not user:
        raise click.ClickException(f"No user with email {email}")

    created = VocabularyService().seed_starter_words(user.id)
    click.echo(f"Added {len(created)} starter words for {email}")


@app.cli.command("sticker-odds")
def sticker_odds_command():
    """Print the drop probability of every sticker."""
    from flowlingo.services.sticker_catalog import STICKER_CATALOG

    total = sum(item.weight for item in STICKER_CATALOG)
    for item in STICKER_CATALOG:
        click.echo(
            f"  {item.emoji}  {item.name:<20} {item.rarity.value:<10} "
            f"{item.weight / total:7.2%}"
        )


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000)
