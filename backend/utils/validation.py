import os
import re
from datetime import datetime
from collections import defaultdict
from flask import current_app
from PIL import Image, UnidentifiedImageError

EMAIL_RE = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
PASSWORD_RE = re.compile(r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]+$')
NAME_RE = re.compile(r'^[a-zA-ZáéíóúÁÉÍÓÚñÑ\s]+$')
PHONE_RE = re.compile(r'^[0-9]+$')
COLOR_RE = re.compile(r'^#?[0-9a-fA-F]{3,8}$')

IMAGE_EXTENSIONS = {'jpeg', 'jpg', 'png', 'gif'}
IMAGE_FORMATS = {'JPEG', 'PNG', 'GIF'}


class ValidationError(Exception):
    """Field-level validation failure, answered with 422."""

    def __init__(self, errors, message="Los datos proporcionados no son válidos."):
        super().__init__(message)
        self.message = message
        self.errors = dict(errors)

    def to_dict(self):
        return {"message": self.message, "errors": self.errors}


class FormValidator:
    """
    Collects Spanish field messages for one request payload.

    Each rule returns the cleaned value (or None) and records a message on
    failure; ``validate()`` raises once with every message collected.
    """

    def __init__(self, data, files=None):
        self.data = data or {}
        self.files = files or {}
        self.errors = defaultdict(list)

    def error(self, field, message):
        self.errors[field].append(message)

    def value(self, field):
        value = self.data.get(field)
        if isinstance(value, str):
            value = value.strip()
        return value

    def present(self, field):
        return self.value(field) not in (None, "")

    def required(self, field, message):
        if not self.present(field):
            self.error(field, message)
            return None
        return self.value(field)

    def string(self, field, label, required=True, max_length=255):
        value = self.value(field)
        if value in (None, ""):
            if required:
                self.error(field, f"El campo {label} es obligatorio.")
            return None
        if not isinstance(value, str):
            self.error(field, f"El campo {label} debe ser una cadena de texto.")
            return None
        if len(value) > max_length:
            self.error(field, f"El campo {label} no puede exceder los {max_length} caracteres.")
        return value

    def person_name(self, field, required=True):
        value = self.string(field, "nombre", required=required)
        if value and not NAME_RE.match(value):
            self.error(field, "El nombre solo puede contener letras, acentos, la ñ y espacios.")
        return value

    def email(self, field, required=True, unique_in=(), ignore=()):
        """``unique_in`` is a sequence of models with an ``email`` column;
        ``ignore`` holds the rows being updated, which may keep their email."""
        value = self.value(field)
        if value in (None, ""):
            if required:
                self.error(field, "El campo correo electrónico es obligatorio.")
            return None
        if not isinstance(value, str):
            self.error(field, "El campo correo electrónico debe ser una cadena de texto.")
            return None
        if not EMAIL_RE.match(value):
            self.error(field, 'El correo electrónico ingresado no es válido. '
                              'Por ejemplo, usa un formato como "usuario@dominio.com".')
            return value
        ignored = {(type(row), row.id) for row in ignore if row is not None}
        for model in unique_in:
            existing = model.query.filter_by(email=value).first()
            if existing and (model, existing.id) not in ignored:
                self.error(field, "El correo electrónico ya está registrado.")
                break
        return value

    def password(self, field, required=True):
        value = self.data.get(field)
        if value in (None, ""):
            if required:
                self.error(field, "El campo contraseña es obligatorio.")
            return None
        if not isinstance(value, str):
            self.error(field, "El campo contraseña debe ser una cadena de texto.")
            return None
        if len(value) < 8:
            self.error(field, "La contraseña debe tener al menos 8 caracteres.")
        if not PASSWORD_RE.match(value):
            self.error(field, "La contraseña debe contener al menos una mayúscula, una minúscula, "
                              "un número y un carácter especial (@$!%*?&).")
        return value

    def phone(self, field, digits=10, required=True):
        value = self.value(field)
        if value in (None, ""):
            if required:
                self.error(field, "El campo teléfono es obligatorio.")
            return None
        value = str(value)
        if not PHONE_RE.match(value):
            self.error(field, "El número de teléfono debe ser numérico.")
        elif len(value) != digits:
            self.error(field, f"El número de teléfono debe contener exactamente {digits} dígitos.")
        return value

    def integer(self, field, label, required=True):
        value = self.value(field)
        if value in (None, ""):
            if required:
                self.error(field, f"El campo {label} es obligatorio.")
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            self.error(field, f"El campo {label} debe ser un número entero.")
            return None

    def number(self, field, label, required=True):
        value = self.value(field)
        if value in (None, ""):
            if required:
                self.error(field, f"El campo {label} es obligatorio.")
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            self.error(field, f"El campo {label} debe ser numérico.")
            return None

    def boolean(self, field, default=None):
        value = self.data.get(field)
        if value is None or value == "":
            return default
        if isinstance(value, bool):
            return value
        if str(value).lower() in ("1", "true", "on", "yes", "si", "sí"):
            return True
        if str(value).lower() in ("0", "false", "off", "no"):
            return False
        self.error(field, "El valor debe ser verdadero o falso.")
        return default

    def date(self, field, label, required=True):
        value = self.value(field)
        if value in (None, ""):
            if required:
                self.error(field, f"El campo {label} es obligatorio.")
            return None
        try:
            return datetime.strptime(value, "%Y-%m-%d").date()
        except (TypeError, ValueError):
            self.error(field, f"El campo {label} debe tener el formato AAAA-MM-DD.")
            return None

    def choice(self, field, label, enum_class, required=True):
        value = self.value(field)
        if value in (None, ""):
            if required:
                self.error(field, f"El campo {label} es obligatorio.")
            return None
        try:
            return enum_class(value)
        except ValueError:
            allowed = ", ".join(e.value for e in enum_class)
            self.error(field, f"El campo {label} debe ser uno de: {allowed}.")
            return None

    def color(self, field):
        value = self.value(field)
        if value not in (None, "") and not isinstance(value, str):
            self.error(field, "El color debe estar en formato hexadecimal.")
            return None
        if value and not COLOR_RE.match(value):
            self.error(field, "El color debe estar en formato hexadecimal.")
        return value or None

    def exists(self, field, model, label, message, required=True):
        """Resolves an id field to a row of ``model``."""
        from cesi.extensions import db
        row_id = self.integer(field, label, required=required)
        if row_id is None:
            return None
        row = db.session.get(model, row_id)
        if row is None:
            self.error(field, message)
        return row

    def image(self, field, required=True):
        """Accepts jpeg, png, jpg or gif files up to ``MAX_PHOTO_SIZE`` bytes."""
        file = self.files.get(field)
        if not file or not file.filename:
            if required:
                self.error(field, "El campo foto es obligatorio.")
            return None

        ext = os.path.splitext(file.filename)[1].lower().lstrip('.')
        if ext not in IMAGE_EXTENSIONS:
            self.error(field, "La imagen debe ser de tipo jpeg, png, jpg o gif.")
            return None

        file.stream.seek(0, os.SEEK_END)
        size = file.stream.tell()
        file.stream.seek(0)
        if size > current_app.config.get("MAX_PHOTO_SIZE", 2048 * 1024):
            self.error(field, "La imagen no debe exceder los 2 MB.")
            return None

        try:
            with Image.open(file.stream) as img:
                fmt = img.format
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError):
            self.error(field, "El archivo debe ser una imagen.")
            return None
        finally:
            file.stream.seek(0)

        if fmt not in IMAGE_FORMATS:
            self.error(field, "La imagen debe ser de tipo jpeg, png, jpg o gif.")
            return None
        return file

    def validate(self):
        if self.errors:
            raise ValidationError(self.errors)
