"""
Sequence Allocator - unique, strictly increasing patient numbers.

The counter is a single PatientSequence row incremented in place with
UPDATE ... RETURNING, so the read and the write are one statement. Each number
is taken in its own short transaction and committed at once, like a database
sequence: a patient insert that fails afterwards leaves a gap, never a reused
number.
"""

import logging
import re
from datetime import datetime

from flask import current_app
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db
from models import Patient, PatientSequence
from services.exceptions import PersistenceFailure

logger = logging.getLogger(__name__)


def _sequence_name(name=None):
    return name or current_app.config['PATIENT_SEQUENCE_NAME']


def _increment(name):
    return db.session.execute(
        update(PatientSequence)
        .where(PatientSequence.name == name)
        .values(
            last_value=PatientSequence.last_value + 1,
            updated_at=datetime.utcnow(),
        )
        .returning(PatientSequence.last_value)
        .execution_options(synchronize_session=False)
    ).scalar_one_or_none()


def _create_counter(name, start=0):
    try:
        with db.session.begin_nested():
            db.session.add(PatientSequence(name=name, last_value=start))
    except IntegrityError:
        # Created concurrently by another caller; theirs is as good as ours
        logger.debug(f"Counter '{name}' already created")


def next_patient_number(sequence_name=None):
    """
    Fetch-and-increment the patient counter and commit it straight away.

    The session is committed, so call this before staging other changes.
    The number is consumed even if the caller later rolls back.

    Returns:
        int: The next patient number, starting at 1

    Raises:
        PersistenceFailure: The counter could not be read or written
    """
    name = _sequence_name(sequence_name)
    try:
        value = _increment(name)
        if value is None:
            _create_counter(name)
            value = _increment(name)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error(f"Patient counter '{name}' unavailable: {exc}")
        raise PersistenceFailure(f"Patient number counter unavailable: {exc}") from exc

    if value is None:
        raise PersistenceFailure(f"Patient number counter '{name}' could not be created")
    return value


def format_patient_identifier(number):
    """
    7 -> '#FDM000007'

    Numbers wider than the configured padding are kept whole.
    """
    prefix = current_app.config['PATIENT_ID_PREFIX']
    digits = current_app.config['PATIENT_ID_DIGITS']
    return f"#{prefix}{number:0{digits}d}"


def parse_patient_identifier(identifier):
    """'#FDM000007' -> 7, or None when it is not one of ours."""
    prefix = re.escape(current_app.config['PATIENT_ID_PREFIX'])
    match = re.fullmatch(rf'#{prefix}(\d+)', identifier or '')
    return int(match.group(1)) if match else None


def next_patient_identifier(sequence_name=None):
    """Allocate a number and return it formatted, e.g. '#FDM000042'."""
    return format_patient_identifier(next_patient_number(sequence_name))


def current_patient_number(sequence_name=None):
    """Last number handed out (0 if none). Read-only."""
    counter = db.session.get(
        PatientSequence, _sequence_name(sequence_name), populate_existing=True
    )
    return counter.last_value if counter else 0


def sync_patient_sequence(sequence_name=None):
    """
    Move the counter up to the highest identifier already stored on patients.

    Used after importing patients that were numbered elsewhere. The counter
    only moves forward. Does not commit.

    Returns:
        int: The counter value after syncing
    """
    name = _sequence_name(sequence_name)
    identifiers = db.session.execute(select(Patient.patient_identifier)).scalars()
    highest = max(
        (n for n in (parse_patient_identifier(i) for i in identifiers) if n is not None),
        default=0,
    )

    counter = db.session.execute(
        select(PatientSequence)
        .where(PatientSequence.name == name)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if counter is None:
        counter = PatientSequence(name=name, last_value=highest)
        db.session.add(counter)
    elif counter.last_value < highest:
        counter.last_value = highest

    db.session.flush()
    logger.info(f"Patient counter '{name}' synced to {counter.last_value}")
    return counter.last_value
