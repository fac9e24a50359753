from .base_route import base_bp
from .auth import auth_bp
from .registration import registration_bp
from .dashboard import dashboard_bp
from .guardians import guardians_bp
from .pickups import pickups_bp
from .tracking import tracking_bp
from .sessions import sessions_bp
from .classrooms import classrooms_bp
from .tutors import tutors_bp
from .schools import schools_bp
from .notifications import notifications_bp
from .teachers import teachers_bp
from .passes import passes_bp
from .uploads import upload_bp
from .admin_tutors import admin_tutors_bp
from .admin_guardians import admin_guardians_bp


def register_routes(app):
    app.register_blueprint(base_bp)
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(registration_bp, url_prefix='/registro')
    app.register_blueprint(dashboard_bp, url_prefix='/dashboard')
    app.register_blueprint(guardians_bp, url_prefix='/responsables')
    app.register_blueprint(pickups_bp, url_prefix='/recogida')
    app.register_blueprint(tracking_bp, url_prefix='/rastreo')
    app.register_blueprint(sessions_bp, url_prefix='/sesiones')
    app.register_blueprint(classrooms_bp, url_prefix='/salones')
    app.register_blueprint(tutors_bp, url_prefix='/tutores')
    app.register_blueprint(schools_bp, url_prefix='/escuelas')
    app.register_blueprint(notifications_bp, url_prefix='/notificaciones')
    app.register_blueprint(teachers_bp, url_prefix='/maestros')
    app.register_blueprint(passes_bp, url_prefix='/pase')
    app.register_blueprint(upload_bp, url_prefix='/uploads')
    app.register_blueprint(admin_tutors_bp, url_prefix='/admin/tutores')
    app.register_blueprint(admin_guardians_bp, url_prefix='/admin/responsables')
