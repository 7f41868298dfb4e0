"""
Patient routes - creation with an allocated #FDM identifier.
"""

import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user

from extensions import db
from logging_config import audit_logger
from models import Patient
from routes.decorators import permission_required
from schemas import PatientCreate
from services.patient_service import create_patient

logger = logging.getLogger(__name__)

patients_bp = Blueprint('patients', __name__)


def _serialize_patient(patient):
    return {
        'id': patient.id,
        'patient_identifier': patient.patient_identifier,
        'name': patient.name,
        'phone': patient.phone,
        'email': patient.email,
        'created_at': patient.created_at.isoformat() if patient.created_at else None,
    }


@patients_bp.route('/patients', methods=['POST'])
@permission_required('patients', 'create')
def create():
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({'error': 'JSON body required'}), 400

    patient = create_patient(PatientCreate.model_validate(data))
    audit_logger.log_patient_created(patient, user_id=current_user.id)
    return jsonify(_serialize_patient(patient)), 201


@patients_bp.route('/patients/<int:patient_id>')
@permission_required('patients', 'read')
def get(patient_id):
    patient = db.session.get(Patient, patient_id)
    if not patient:
        return jsonify({'error': 'Patient not found'}), 404
    return jsonify(_serialize_patient(patient))
