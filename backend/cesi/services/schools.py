from flask import current_app
from cesi.models import School, SchoolBranding
from cesi.services.storage import stored_uploads, delete_file, SCHOOLS_FOLDER
from utils.db import atomic
from utils.validation import FormValidator, ValidationError


def _school_form(data, files):
    v = FormValidator(data, files)
    form = {
        "name": v.string("name", "nombre de la escuela"),
        "address": v.string("address", "dirección", required=False),
        "color1": v.color("color1"),
        "color2": v.color("color2"),
        "color3": v.color("color3"),
        "logo": v.image("logo", required=False),
    }
    v.validate()
    return form


def create_school(administrator, data, files):
    form = _school_form(data, files)

    with stored_uploads() as uploads, atomic() as session:
        school = School(name=form["name"], address=form["address"], administrator=administrator)
        branding = SchoolBranding(
            school=school,
            color1=form["color1"],
            color2=form["color2"],
            color3=form["color3"],
        )
        if form["logo"]:
            branding.logo = uploads.store(form["logo"], SCHOOLS_FOLDER)
        session.add_all([school, branding])

    current_app.logger.info("School %s created for administrator %s", school.id, administrator.id)
    return school


def update_school(school, data, files):
    form = _school_form(data, files)

    branding = school.branding
    old_logo = branding.logo if branding else None
    with stored_uploads() as uploads, atomic() as session:
        school.name = form["name"]
        school.address = form["address"]

        if branding is None:
            branding = SchoolBranding(school=school)
            session.add(branding)
        for key in ("color1", "color2", "color3"):
            if form[key] is not None:
                setattr(branding, key, form[key])
        if form["logo"]:
            branding.logo = uploads.store(form["logo"], SCHOOLS_FOLDER)

    if form["logo"] and old_logo:
        delete_file(old_logo)
    return school


def delete_school(school):
    if school.teachers or school.tutors:
        raise ValidationError(
            {"school": ["No se puede eliminar una escuela con maestros o tutores registrados."]},
            message="La escuela tiene registros asociados."
        )

    logos = [b.logo for b in school.brandings if b.logo]
    with atomic() as session:
        session.delete(school)

    for logo in logos:
        delete_file(logo)
