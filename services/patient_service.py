"""
Patient creation: allocate an identifier, then insert the patient.

The identifier is committed before the insert, so a failed insert burns its
number and a retry gets the next one.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import Patient
from services.exceptions import PersistenceFailure
from services.sequence_service import next_patient_identifier

logger = logging.getLogger(__name__)


def create_patient(data):
    """
    Create a patient with a freshly allocated identifier.

    Starts a new unit of work; anything pending in the session is committed
    along with the counter.

    Args:
        data: schemas.PatientCreate

    Returns:
        Patient: Committed patient

    Raises:
        PersistenceFailure: Counter or insert failed; no patient was stored
    """
    try:
        identifier = next_patient_identifier()
        patient = Patient(
            patient_identifier=identifier,
            name=data.name,
            phone=data.phone,
            email=data.email,
        )
        db.session.add(patient)
        db.session.commit()
    except PersistenceFailure:
        db.session.rollback()
        raise
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error(f"Failed to create patient '{data.name}': {exc}")
        raise PersistenceFailure(f"Failed to create patient: {exc}") from exc

    logger.info(f"Patient created: {patient.patient_identifier} ({patient.name})")
    return patient
