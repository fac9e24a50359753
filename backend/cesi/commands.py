import click
from flask_migrate import upgrade, migrate, init
from cesi.extensions import db
from cesi.models import User, Administrator, RoleEnum
from cesi.seed import seed_data
from utils.validation import FormValidator, ValidationError


def create_administrator(name, email, password):
    """Administrator profile plus its admin credential, in one commit."""
    v = FormValidator({"name": name, "email": email, "password": password})
    v.string("name", "nombre")
    v.email("email", unique_in=(Administrator, User))
    v.password("password")
    v.validate()

    admin = Administrator(name=name, email=email)
    user = User(name=name, email=email, role=RoleEnum.admin)
    user.set_password(password)
    db.session.add_all([admin, user])
    db.session.commit()
    return admin


def register_commands(app):

    @app.cli.command("db-init")
    def db_init():
        """Initializes migrations directory"""
        init()

    @app.cli.command("db-migrate")
    def db_migrate():
        """Creates a new migration"""
        migrate()

    @app.cli.command("db-upgrade")
    def db_upgrade():
        """Applies migrations"""
        upgrade()

    @app.cli.command("create-admin")
    @click.option("--name", prompt=True)
    @click.option("--email", prompt=True)
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    def create_admin(name, email, password):
        """Creates an administrator and its login credential"""
        try:
            admin = create_administrator(name, email, password)
        except ValidationError as e:
            for field, messages in e.errors.items():
                for message in messages:
                    click.echo(f"{field}: {message}", err=True)
            raise click.Abort()
        click.echo(f"Administrador {admin.email} creado.")

    @app.cli.command("seed")
    @click.option("--reset", is_flag=True, help="Drop and recreate every table first")
    def seed(reset):
        """Inserts demo schools, accounts and students"""
        if reset:
            db.drop_all()
            db.create_all()
        summary = seed_data()
        for key, count in summary.items():
            click.echo(f"{key}: {count}")
        click.echo("Seed data inserted successfully.")
