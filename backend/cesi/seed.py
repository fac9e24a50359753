import os
from datetime import date
from cesi.extensions import db
from cesi.models import (
    User, Administrator, RoleEnum, School, SchoolBranding, Classroom, Teacher, Tutor, Guardian,
    Student, ClassSession,
)


def _credential(name, email, role, password):
    user = User(name=name, email=email, role=role)
    user.set_password(password)
    return user


def seed_data():
    """
    Demo data: one administrator owning two schools, each with a teacher, a
    classroom, a tutor (with its mirrored guardian) and two students.
    Rows whose email already exists are left alone.
    """
    admin_password = os.getenv("ADMIN_PASSWORD", "Admin123!")
    demo_password = os.getenv("DEMO_PASSWORD", "Demo1234!")
    summary = {"schools": 0, "teachers": 0, "tutors": 0, "students": 0}

    admin = Administrator.query.filter_by(email="admin@cesi.mx").first()
    if not admin:
        admin = Administrator(name="Administrador CESI", email="admin@cesi.mx")
        db.session.add_all([admin, _credential(admin.name, admin.email, RoleEnum.admin, admin_password)])
        db.session.commit()

    schools = [
        ("Escuela Primaria Benito Juárez", "Av. Reforma 120", ("#1d3557", "#457b9d", "#f1faee"),
         "Laura Méndez", "Ana López"),
        ("Colegio Miguel Hidalgo", "Calle Morelos 45", ("#2a9d8f", "#e9c46a", "#264653"),
         "Jorge Ramírez", "Carlos Pérez"),
    ]

    for index, (name, address, colors, teacher_name, tutor_name) in enumerate(schools, start=1):
        school = School.query.filter_by(name=name, administrator_id=admin.id).first()
        if school:
            continue

        school = School(name=name, address=address, administrator=admin)
        branding = SchoolBranding(school=school, color1=colors[0], color2=colors[1], color3=colors[2])

        teacher = Teacher(name=teacher_name, email=f"maestra{index}@cesi.mx",
                          phone=f"55500000{index:02d}", school=school)
        classroom = Classroom(name=f"{index}° A", grade=f"{index}°", school=school, teacher=teacher)
        session = ClassSession(name="Clase inaugural", date=date.today(), classroom=classroom, teacher=teacher)

        tutor = Tutor(name=tutor_name, email=f"tutor{index}@cesi.mx",
                      phone=f"55510000{index:02d}", school=school)
        mirror = Guardian(name=tutor.name, email=tutor.email, phone=tutor.phone, active=True, tutor=tutor)
        students = [
            Student(name=f"{first} {tutor_name.split()[-1]}", tutor=tutor, classroom=classroom)
            for first in ("Sofía", "Mateo")
        ]

        db.session.add_all([school, branding, teacher, classroom, session, tutor, mirror, *students])
        db.session.add_all([
            _credential(teacher.name, teacher.email, RoleEnum.teacher, demo_password),
            _credential(tutor.name, tutor.email, RoleEnum.tutor, demo_password),
        ])
        db.session.commit()

        summary["schools"] += 1
        summary["teachers"] += 1
        summary["tutors"] += 1
        summary["students"] += len(students)

    return summary
