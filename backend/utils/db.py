from contextlib import contextmanager
from cesi.extensions import db


@contextmanager
def atomic():
    """Commits every write made inside the block, or none of them."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
